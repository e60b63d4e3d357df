class SigningError(Exception):
    """Base class for failures while computing request signatures."""


class EncodingError(SigningError, ValueError):
    """A signing input could not be encoded as UTF-8."""

    def __init__(self, field: str) -> None:
        # Only the field name is reported; values may be secret.
        super().__init__(f"{field} cannot be encoded as UTF-8")
        self.field = field


class CryptoUnavailable(SigningError, RuntimeError):
    """HMAC-SHA256 is not available in this interpreter."""
