from typing import Any, Callable, Optional
from threading import Event
from ..quotes import InstrumentClass, QuoteRequest, QuoteSnapshot
from ..base_client import BaseAPIClient, get_logger
from ..session_store import Session
import requests


# Settlement segment used by the tickers search.
SETTLEMENT_SEGMENT = "C"
# Market-segment/currency suffix appended to cedear codes.
CEDEAR_SUFFIX = "0003-C-CT-ARS"

# Sentinel meaning "use the provider's configured login timeout".
DEFAULT_TIMEOUT = object()


class MarketsAPI(BaseAPIClient):
    """
    Quote lookups against the markets endpoints.

    Calls can be issued before login has finished: each one first asks the
    session provider for a ready session, which blocks until the login task
    completes, times out, or is cancelled.

    Attributes
    ----------
    session_provider : callable
        ``session_provider(timeout=..., cancel_event=...) -> Session``.
    """

    def __init__(
        self,
        *,
        api_url: str,
        session_provider: Callable[..., Session],
        request_timeout: Optional[float] = 30,
        verbose: bool = False,
    ) -> None:
        super().__init__(api_url=api_url, request_timeout=request_timeout)
        self.session_provider = session_provider
        self.logger = get_logger("autoshort.markets", verbose)

    def quote_url(
        self,
        request: QuoteRequest
    ) -> tuple:
        """Return ``(url, params)`` for the request's instrument class."""
        code = requests.utils.quote(request.instrument_code)
        if request.instrument_class is InstrumentClass.CEDEAR:
            url = (
                f"{self.api_url}/api/v1/markets/ticker/"
                f"{code}-{CEDEAR_SUFFIX}"
            )
            return url, {}

        url = f"{self.api_url}/api/v1/markets/tickers/{code}"
        return url, {"segment": SETTLEMENT_SEGMENT}

    def get_quote(
        self,
        request: QuoteRequest,
        *,
        timeout: Any = DEFAULT_TIMEOUT,
        cancel_event: Optional[Event] = None,
    ) -> QuoteSnapshot:
        """
        Fetch and normalize the quote for one instrument.

        Parameters
        ----------
        request : QuoteRequest
            Instrument code and class.
        timeout : float or None, optional
            Maximum seconds to wait for login. ``None`` waits forever;
            omitted uses the client's configured default.
        cancel_event : threading.Event, optional
            Setting it aborts a pending wait for login.

        Returns
        -------
        QuoteSnapshot
            Unwrapped quote with bids and asks sorted ascending by price.

        Raises
        ------
        LoginTimeoutError, LoginCancelledError
            If the wait for login ends without a session.
        AuthError
            If the login task itself failed.
        QuoteNotFoundError
            If the endpoint returned an empty result set.
        requests.exceptions.RequestException
            On HTTP, network or decoding failures (no retry).
        """
        wait_kwargs = {"cancel_event": cancel_event}
        if timeout is not DEFAULT_TIMEOUT:
            wait_kwargs["timeout"] = timeout
        session = self.session_provider(**wait_kwargs)

        url, params = self.quote_url(request)
        headers = self.auth_headers(session.access_token, session.id_account)

        self.logger.info(f"Getting information for: {request.instrument_code}")
        payload = self.make_request(url=url, headers=headers, params=params)

        snapshot = QuoteSnapshot.from_payload(payload)
        self.logger.debug(
            f"{request.instrument_code}: {len(snapshot.bids)} bids, "
            f"{len(snapshot.asks)} asks"
        )
        return snapshot
