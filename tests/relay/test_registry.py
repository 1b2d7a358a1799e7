import threading

import pytest

from src.relay.errors import InvalidRequest
from src.relay.registry import BackendRegistry
from src.relay.types import BackendSystem


class TestBackendRegistry:
    """Test suite for BackendRegistry insert-if-absent semantics"""

    def test_register_appends_new_backend(self, registry):
        created = registry.register("u1", "http://b/data", "http://b/ctl")

        assert created is True
        assert registry.list_systems() == [BackendSystem("u1", "http://b/data", "http://b/ctl")]

    def test_duplicate_name_keeps_first_registration(self, registry):
        """
        Test: Registering the same name twice with different URLs
        How: Register u1 twice and inspect the stored entry
        Ensures: Exactly one entry remains and it carries the first URLs
        """
        registry.register("u1", "http://first/data", "http://first/ctl")
        created = registry.register("u1", "http://second/data", "http://second/ctl")

        assert created is False
        assert len(registry) == 1
        system = registry.find_by_name("u1")
        assert system.data_endpoint == "http://first/data"
        assert system.control_endpoint == "http://first/ctl"

    def test_control_endpoint_is_optional(self, registry):
        registry.register("u1", "http://b/data")
        assert registry.find_by_name("u1").control_endpoint is None

    def test_empty_control_endpoint_stored_as_none(self, registry):
        registry.register("u1", "http://b/data", "")
        assert registry.find_by_name("u1").control_endpoint is None

    @pytest.mark.parametrize("name,url", [(None, "http://b/data"), ("", "http://b/data"), ("u1", None), ("u1", "")])
    def test_missing_required_fields_rejected(self, registry, name, url):
        with pytest.raises(InvalidRequest):
            registry.register(name, url, "http://b/ctl")
        assert len(registry) == 0

    def test_duplicate_urls_and_malformed_urls_accepted(self, registry):
        registry.register("u1", "http://same/data")
        registry.register("u2", "http://same/data")
        registry.register("u3", "not a url")
        assert [s.name for s in registry.list_systems()] == ["u1", "u2", "u3"]

    def test_numeric_fields_stored_as_strings(self, registry):
        registry.register(123, "http://b/data")
        assert registry.find_by_name("123").data_endpoint == "http://b/data"

    @pytest.mark.parametrize("name", [{"id": 1}, ["u1"], True])
    def test_unusable_name_rejected(self, registry, name):
        with pytest.raises(InvalidRequest, match="Invalid username"):
            registry.register(name, "http://b/data")
        assert len(registry) == 0

    def test_find_by_name_unknown(self, registry):
        registry.register("u1", "http://b/data")
        assert registry.find_by_name("nobody") is None

    def test_list_systems_returns_copy(self, registry):
        registry.register("u1", "http://b/data")
        systems = registry.list_systems()
        systems.clear()
        assert len(registry) == 1

    def test_registration_order_preserved(self, registry):
        for name in ["c", "a", "b"]:
            registry.register(name, f"http://{name}/data")
        assert [s.name for s in registry.list_systems()] == ["c", "a", "b"]

    def test_stats(self, registry):
        registry.register("u1", "http://b/data")
        assert registry.get_stats() == {"registered_backends": 1}

    def test_concurrent_duplicate_registrations_insert_once(self):
        registry = BackendRegistry()
        barrier = threading.Barrier(8)

        def worker(i):
            barrier.wait()
            registry.register("shared", f"http://b{i}/data")

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 1
