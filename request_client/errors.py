"""Exception hierarchy raised by request clients."""


class RequestClientError(RuntimeError):
    """Base class for every failure surfaced by a request client."""


class InvalidVerb(RequestClientError, ValueError):
    """The requested HTTP method is not one the client supports."""

    def __init__(self, verb: object) -> None:
        super().__init__(f"Unrecognised method: {verb!r}")
        self.verb = verb


class UnresolvedAddress(RequestClientError):
    """A resolver could not turn an address into a host:port endpoint."""

    def __init__(self, address: object, reason: str) -> None:
        super().__init__(f"Unable to resolve {address}: {reason}")
        self.address = address
        self.reason = reason


class ResolutionFailure(RequestClientError):
    """The service location could not be determined; never retried."""

    def __init__(self, address: object, cause: BaseException) -> None:
        super().__init__(f"Unable to resolve service location for {address}: {cause}")
        self.address = address
        self.cause = cause


class TransportFailure(RequestClientError):
    """A network or HTTP level failure reported by the transport."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        timed_out: bool = False,
        connection_error: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.timed_out = timed_out
        self.connection_error = connection_error


class RetryExhausted(TransportFailure):
    """The attempt budget was spent; carries the last transport failure."""

    def __init__(self, last_failure: TransportFailure, attempts: int) -> None:
        super().__init__(
            last_failure.message,
            status_code=last_failure.status_code,
            timed_out=last_failure.timed_out,
            connection_error=last_failure.connection_error,
        )
        self.last_failure = last_failure
        self.attempts = attempts
