from typing import Any, Optional
import requests


class AutoShortError(RuntimeError):
    """Base class for every error raised by this client."""


class ConfigError(AutoShortError):
    """Raised when a required configuration value is missing or empty."""


class AuthError(AutoShortError):
    """
    Raised when the password-grant login is rejected or the account profile
    carries no usable account id.

    Attributes
    ----------
    status : int, optional
        HTTP status code returned by the token endpoint.
    reason : str, optional
        HTTP status text.
    body : Any, optional
        Parsed error body (JSON when decodable, raw text otherwise).
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        reason: Optional[str] = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.reason = reason
        self.body = body


class StoreReadError(AutoShortError):
    """Raised internally when the session cache cannot be read or parsed."""


class LoginTimeoutError(AutoShortError):
    """Raised when login does not complete within the allowed wait."""


class LoginCancelledError(AutoShortError):
    """Raised when a caller aborts the wait for login."""


class QuoteNotFoundError(AutoShortError):
    """Raised when the quote endpoint returns an empty result set."""


# Network and decoding failures are raised by requests and propagate as-is.
TransportError = requests.exceptions.RequestException
