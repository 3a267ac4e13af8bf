"""Custom exception hierarchy for the CORS relay."""


class RelayError(Exception):
    """Base exception for all relay errors."""


class ConfigurationError(RelayError):
    """Raised when configuration is missing or invalid."""


class TargetDecodeError(RelayError):
    """Percent-encoded target in the inbound path cannot be decoded."""


class BodyDecodeError(RelayError):
    """Inbound body does not match its declared content type.

    Attributes:
        message: Error message
        encoding: Body encoding that failed (e.g., 'json', 'form')
    """

    def __init__(self, message: str, encoding: str | None = None) -> None:
        super().__init__(message)
        self.encoding = encoding


class UpstreamError(RelayError):
    """Raised when the target cannot be reached.

    Attributes:
        message: Error message
        target: Target URL the request was sent to (optional)
    """

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target


class UpstreamTimeoutError(UpstreamError):
    """Raised when the target request times out."""


class UpstreamConnectionError(UpstreamError):
    """Raised when unable to connect to the target (DNS, TLS, refused)."""
