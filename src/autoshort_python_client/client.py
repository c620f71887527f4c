from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional, Union
from threading import Event
from .endpoints.markets import DEFAULT_TIMEOUT, MarketsAPI
from .endpoints.stream import StreamListener
from .errors import ConfigError, LoginCancelledError, LoginTimeoutError
from .quotes import InstrumentClass, QuoteRequest, QuoteSnapshot
from .session_store import Session, SessionStore
from .base_client import get_logger
from .config import ClientConfig
from .auth import AuthClient
import time


class AutoShortClient:
    """
    Central entry point: wires the session cache, the login task, quote
    lookups and the optional stream listener around one configuration.

    Construction never blocks. A fresh cached session is reused as is;
    otherwise login is submitted to a single background worker and
    `login_future` tracks it. Quote calls wait on that future.

    Examples
    --------
    >>> with AutoShortClient.from_env() as client:
    ...     snapshot = client.get_quote("YPFD", "cedear")
    """

    def __init__(
        self,
        config: ClientConfig
    ) -> None:
        self.config = config
        # Raises ConfigError on missing credentials.
        self.credentials = config.credentials
        self.logger = get_logger("autoshort.client", config.verbose)

        self.session_store = SessionStore(
            config.session_file, verbose=config.verbose
        )
        self.auth = AuthClient(
            session_store=self.session_store,
            request_timeout=config.request_timeout,
            verbose=config.verbose,
        )
        # Sub-clients share the same login task through wait_until_ready.
        self.markets = MarketsAPI(
            api_url=config.api_url,
            session_provider=self.wait_until_ready,
            request_timeout=config.request_timeout,
            verbose=config.verbose,
        )
        self.stream = StreamListener(verbose=config.verbose)

        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="autoshort-login"
        )
        self.login_future = self._start_session()

    @classmethod
    def from_env(cls) -> "AutoShortClient":
        return cls(ClientConfig.from_env())

    def __enter__(self) -> "AutoShortClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _start_session(self) -> Future:
        cached = self.session_store.load(self.credentials.username)
        if (
            cached is not None
            and cached.is_complete
            and self.session_store.is_fresh(cached)
        ):
            self.logger.info(
                f"Reusing cached session for {cached.username} "
                f"(account {cached.id_account})"
            )
            future: Future = Future()
            future.set_result(cached)
            return future

        return self._executor.submit(self.auth.login, self.credentials)

    @property
    def session(self) -> Optional[Session]:
        """The active session, or None while login is pending or failed."""
        future = self.login_future
        if future.done() and not future.cancelled() and not future.exception():
            return future.result()
        return None

    def wait_until_ready(
        self,
        *,
        timeout: Any = DEFAULT_TIMEOUT,
        cancel_event: Optional[Event] = None,
    ) -> Session:
        """
        Block until login has completed and return the session.

        The login future is checked every ``config.poll_interval`` seconds.

        Parameters
        ----------
        timeout : float or None, optional
            Maximum seconds to wait; ``None`` waits forever. Defaults to
            ``config.login_timeout``.
        cancel_event : threading.Event, optional
            Aborts the wait once set.

        Raises
        ------
        LoginTimeoutError
            If ``timeout`` elapses first.
        LoginCancelledError
            If ``cancel_event`` is set first.
        AuthError, requests.exceptions.RequestException
            Re-raised from a failed login.
        """
        if timeout is DEFAULT_TIMEOUT:
            timeout = self.config.login_timeout

        deadline = None if timeout is None else time.monotonic() + timeout
        while not self.login_future.done():
            if cancel_event is not None and cancel_event.is_set():
                raise LoginCancelledError("Wait for login was cancelled")

            wait_for = self.config.poll_interval
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise LoginTimeoutError(
                        f"Login did not complete within {timeout}s"
                    )
                wait_for = min(wait_for, remaining)

            wait([self.login_future], timeout=wait_for)

        return self.login_future.result()

    def get_quote(
        self,
        instrument_code: str,
        instrument_class: Union[str, InstrumentClass] = InstrumentClass.DEFAULT,
        **wait_kwargs,
    ) -> QuoteSnapshot:
        """
        Shortcut for ``markets.get_quote(QuoteRequest(...))``.

        ``wait_kwargs`` accepts ``timeout`` and ``cancel_event``.
        """
        request = QuoteRequest(instrument_code, instrument_class)
        return self.markets.get_quote(request, **wait_kwargs)

    def listen(
        self,
        endpoint: Optional[str] = None,
        on_message: Optional[Callable[[str], None]] = None,
    ) -> None:
        """
        Run the stream listener against ``endpoint`` or the configured
        ``stream_endpoint``. Blocks until the socket closes.
        """
        endpoint = endpoint or self.config.stream_endpoint
        if not endpoint:
            raise ConfigError(
                'Missing param "stream_endpoint" in client configuration.'
            )
        self.stream.listen(endpoint, on_message=on_message)

    def close(self) -> None:
        """Stop the stream, if any, and release the login worker."""
        self.stream.stop()
        self._executor.shutdown(wait=False, cancel_futures=True)
