import asyncio
import json

import pytest

from src.pipeline.pools.dispatcher import ControlDispatcher
from src.relay.errors import InvalidRequest, NotFound, UpstreamError


@pytest.fixture
def dispatcher(registry, backend_client):
    return ControlDispatcher(registry, backend_client)


class TestControlDispatcher:
    """Test suite for routing control commands to backends"""

    def test_routes_by_identifier_prefix(self, dispatcher, registry, backends):
        registry.register("one", "http://pools/poolaa/data", "http://pools/poolaa/control")
        registry.register("two", "http://pools/poolbb/data", "http://pools/poolbb/control")
        backends.control["http://pools/poolbb/control"] = (200, {"ok": True})

        result = asyncio.run(dispatcher.send_control("poolbb-0042", "pump", "on"))

        assert result == {"ok": True}
        sent = backends.posted()[0]
        assert str(sent.url) == "http://pools/poolbb/control"
        assert json.loads(sent.content) == {"systemId": "poolbb-0042", "action": "pump", "value": "on"}

    def test_first_registered_match_wins(self, dispatcher, registry):
        """
        Test: Two backends whose data URLs both contain the prefix
        How: Resolve an identifier shared by both
        Ensures: Registration order decides, as the correlation is only a heuristic
        """
        registry.register("first", "http://h/iapool-a/data")
        registry.register("second", "http://h/iapool-b/data")

        assert dispatcher.resolve_backend("iapool-b-1").name == "first"

    def test_short_identifier_uses_whole_value(self, dispatcher, registry):
        registry.register("one", "http://pools/abc/data")
        assert dispatcher.resolve_backend("ab").name == "one"

    def test_value_is_optional(self, dispatcher, registry, backends):
        registry.register("one", "http://pools/iapool1/data", "http://pools/iapool1/control")
        backends.control["http://pools/iapool1/control"] = (200, {})

        asyncio.run(dispatcher.send_control("iapool1", "reset"))

        assert json.loads(backends.posted()[0].content)["value"] is None

    def test_no_correlating_backend(self, dispatcher, registry):
        registry.register("one", "http://pools/iapool1/data", "http://pools/iapool1/control")
        with pytest.raises(NotFound):
            asyncio.run(dispatcher.send_control("zzzzzz-1", "pump", "on"))

    @pytest.mark.parametrize("system_id,action", [(None, "pump"), ("", "pump"), ("iapool1", None), ("iapool1", "")])
    def test_missing_fields(self, dispatcher, system_id, action):
        with pytest.raises(InvalidRequest):
            asyncio.run(dispatcher.send_control(system_id, action))

    def test_upstream_failure(self, dispatcher, registry, backends):
        registry.register("one", "http://pools/iapool1/data", "http://pools/iapool1/control")
        backends.control["http://pools/iapool1/control"] = (502, {"error": "gateway"})
        with pytest.raises(UpstreamError):
            asyncio.run(dispatcher.send_control("iapool1", "pump"))

    def test_backend_without_control_url(self, dispatcher, registry):
        registry.register("one", "http://pools/iapool1/data")
        with pytest.raises(UpstreamError):
            asyncio.run(dispatcher.send_control("iapool1", "pump"))

    def test_numeric_identifier_forwarded_as_string(self, dispatcher, registry, backends):
        registry.register("one", "http://pools/123456/data", "http://pools/123456/control")
        backends.control["http://pools/123456/control"] = (200, {})

        asyncio.run(dispatcher.send_control(1234567, "pump"))

        assert json.loads(backends.posted()[0].content)["systemId"] == "1234567"

    def test_object_identifier_rejected(self, dispatcher, registry):
        registry.register("one", "http://pools/iapool1/data", "http://pools/iapool1/control")
        with pytest.raises(InvalidRequest, match="Invalid systemId"):
            asyncio.run(dispatcher.send_control({"id": "iapool1"}, "pump"))
