#unified relay errors, mapped to HTTP statuses by the api layer
class RelayError(RuntimeError): ...
class InvalidRequest(RelayError): ...
class NotFound(RelayError): ...
class IndexOutOfRange(NotFound): ...
class UpstreamError(RelayError): ...
