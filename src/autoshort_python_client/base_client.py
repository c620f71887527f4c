from typing import Any, Dict, Optional
import requests
import logging


def get_logger(
    name: str,
    verbose: bool = False
) -> logging.Logger:
    """
    Return a namespaced logger with a single console handler attached.

    Parameters
    ----------
    name : str
        Logger name, e.g. ``"autoshort.auth"``.
    verbose : bool, default=False
        INFO level when True, WARNING otherwise.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    logger.propagate = False
    return logger


class BaseAPIClient:
    """
    Base HTTP client for the brokerage REST endpoints.

    Issues authenticated GET requests and decodes JSON. There is no retry
    or token refresh here: failures surface to the caller, and the
    external scheduler decides whether to call again.
    """

    def __init__(
        self,
        *,
        api_url: str,
        request_timeout: Optional[float] = 30,
    ) -> None:
        self.api_url = api_url
        self.request_timeout = request_timeout

    def make_request(
        self,
        url: str,
        headers: dict,
        params: Optional[dict] = None
    ) -> Any:
        """
        Execute an authenticated GET request.

        Parameters
        ----------
        url : str
            Full endpoint URL.
        headers : dict
            HTTP headers (must include Authorization).
        params : dict, optional
            Query parameters for the request.

        Returns
        -------
        Any
            Parsed JSON response (object or array).

        Raises
        ------
        requests.exceptions.RequestException
            On connection failures, non-2xx statuses or undecodable bodies.
        """
        resp = requests.get(
            url,
            headers=headers,
            params=params or {},
            timeout=self.request_timeout
        )
        resp.raise_for_status()

        return resp.json()

    @staticmethod
    def auth_headers(
        access_token: str,
        id_account: Optional[str] = None
    ) -> Dict[str, str]:
        """Build the bearer (and optional account) headers."""
        headers = {"Authorization": f"Bearer {access_token}"}
        if id_account:
            headers["X-Account-Id"] = str(id_account)
        return headers
