from dataclasses import dataclass, field
from typing import Optional
from dotenv import dotenv_values
from .errors import ConfigError
import os


DEFAULT_SESSION_FILE = ".sessions.json"
DEFAULT_ENV_FILE = ".env"


@dataclass(frozen=True)
class Credentials:
    """
    Username, password and API root used for the password-grant login.

    All three fields are required and immutable once built.
    """

    username: str
    password: str = field(repr=False)
    api_url: str

    def __post_init__(self) -> None:
        for name in ("username", "password", "api_url"):
            if not getattr(self, name):
                raise ConfigError(
                    f'Missing param "{name}" in client configuration.'
                )


@dataclass(frozen=True)
class ClientConfig:
    """
    Construction options for `AutoShortClient`.

    Parameters
    ----------
    username, password, api_url : str
        Required login credentials and API root (no trailing slash).
    verbose : bool, default=False
        Log progress at INFO level when True.
    stream_endpoint : str, optional
        WebSocket URL used by `listen()`.
    session_file : str, optional
        Path of the JSON session cache. ``None`` disables persistence.
    login_timeout : float, optional
        Seconds a quote call waits for login. ``None`` waits forever.
    poll_interval : float, default=1.0
        Seconds between readiness checks while waiting for login.
    request_timeout : float, default=30
        Timeout applied to every HTTP request.
    """

    username: str
    password: str = field(repr=False)
    api_url: str
    verbose: bool = False
    stream_endpoint: Optional[str] = None
    session_file: Optional[str] = DEFAULT_SESSION_FILE
    login_timeout: Optional[float] = None
    poll_interval: float = 1.0
    request_timeout: float = 30

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ConfigError("poll_interval must be positive.")
        if self.login_timeout is not None and self.login_timeout < 0:
            raise ConfigError("login_timeout cannot be negative.")

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            username=self.username,
            password=self.password,
            api_url=self.api_url,
        )

    @classmethod
    def from_env(
        cls,
        env_file: Optional[str] = DEFAULT_ENV_FILE
    ) -> "ClientConfig":
        """
        Build a configuration from environment variables.

        Reads ``USERNAME``, ``PASSWORD`` and ``API_URL`` (required) plus
        ``WEBSOCKET``, ``AUTOSHORT_SESSION_FILE``, ``AUTOSHORT_LOGIN_TIMEOUT``
        and ``AUTOSHORT_VERBOSE``. A trailing slash on ``API_URL`` is
        stripped.

        Parameters
        ----------
        env_file : str, optional
            Dotenv file merged underneath the process environment (real
            environment variables win). ``None`` skips it; a missing file
            is ignored.

        Raises
        ------
        ConfigError
            If a required variable is missing or a numeric one is invalid.
        """
        env = {
            **(dotenv_values(env_file) if env_file else {}),
            **os.environ,
        }

        for var in ("USERNAME", "PASSWORD", "API_URL"):
            if not env.get(var):
                raise ConfigError(f'Missing "{var}" env variable.')

        api_url = env["API_URL"]
        if api_url.endswith("/"):
            api_url = api_url[:-1]

        raw_timeout = env.get("AUTOSHORT_LOGIN_TIMEOUT")
        try:
            login_timeout = float(raw_timeout) if raw_timeout else None
        except ValueError:
            raise ConfigError(
                f"Invalid AUTOSHORT_LOGIN_TIMEOUT: {raw_timeout!r}"
            )

        verbose = (env.get("AUTOSHORT_VERBOSE") or "").lower() in (
            "1", "true", "yes"
        )

        return cls(
            username=env["USERNAME"],
            password=env["PASSWORD"],
            api_url=api_url,
            verbose=verbose,
            stream_endpoint=env.get("WEBSOCKET") or None,
            session_file=env.get(
                "AUTOSHORT_SESSION_FILE"
            ) or DEFAULT_SESSION_FILE,
            login_timeout=login_timeout,
        )
