from .client import AutoShortClient
from .config import ClientConfig, Credentials
from .errors import (
    AutoShortError,
    ConfigError,
    AuthError,
    StoreReadError,
    TransportError,
    LoginTimeoutError,
    LoginCancelledError,
    QuoteNotFoundError,
)
from .quotes import InstrumentClass, QuoteRequest, QuoteSnapshot, PriceLevel
from .session_store import Session, SessionStore

__all__ = [
    "AutoShortClient",
    "ClientConfig",
    "Credentials",
    "AutoShortError",
    "ConfigError",
    "AuthError",
    "StoreReadError",
    "TransportError",
    "LoginTimeoutError",
    "LoginCancelledError",
    "QuoteNotFoundError",
    "InstrumentClass",
    "QuoteRequest",
    "QuoteSnapshot",
    "PriceLevel",
    "Session",
    "SessionStore",
]
