class BuildError(Exception):
    """Input could not be turned into a request. Nothing was sent."""


class InvalidUrl(BuildError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ConflictingBody(BuildError):
    def __init__(self):
        super().__init__("Only one of --data and --json may be given.")


class InvalidJson(BuildError):
    """The --json payload is not syntactically valid JSON."""

    def __init__(self, offset: int, reason: str):
        self.offset = offset
        self.reason = reason
        super().__init__(f"Invalid JSON at offset {offset}: {reason}")


class TransportError(Exception):
    """The request never produced an HTTP response (DNS, connect, TLS, timeout)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
