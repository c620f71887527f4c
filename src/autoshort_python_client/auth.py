from typing import Any, Optional
from .base_client import BaseAPIClient, get_logger
from .session_store import Session, SessionStore, now_ms
from .config import Credentials
from .errors import AuthError
import requests
import json


class AuthClient:
    """
    Exchanges username/password for a bearer token and resolves the
    account id the quote endpoints expect.

    Responsibilities:
    - Perform the password-grant login.
    - Fetch the user profile and pick the account id.
    - Record the resulting session in the SessionStore.

    Nothing is retried; every failure reaches the caller.
    """

    def __init__(
        self,
        *,
        session_store: SessionStore,
        request_timeout: Optional[float] = 30,
        verbose: bool = False,
    ) -> None:
        self.session_store = session_store
        self.request_timeout = request_timeout
        self.logger = get_logger("autoshort.auth", verbose)

    @staticmethod
    def _error_body(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def _request_token(
        self,
        credentials: Credentials
    ) -> str:
        url = f"{credentials.api_url}/auth/v1/token"
        response = requests.post(
            url,
            params={"grant_type": "password"},
            headers={"Content-Type": "application/json"},
            json={
                "email": credentials.username,
                "password": credentials.password,
            },
            timeout=self.request_timeout,
        )

        if 400 <= response.status_code < 500:
            body = self._error_body(response)
            raise AuthError(
                f"Status: {response.status_code} ({response.reason}): "
                f"{json.dumps(body, separators=(',', ':'))}",
                status=response.status_code,
                reason=response.reason,
                body=body,
            )
        response.raise_for_status()

        self.logger.info(f"Login success: {response.status_code}")
        data = response.json()

        access_token = (
            data.get("access_token") if isinstance(data, dict) else None
        )
        if not access_token:
            raise AuthError(
                "Token endpoint returned no access_token",
                status=response.status_code,
                reason=response.reason,
                body=data,
            )
        return access_token

    def _request_account_id(
        self,
        credentials: Credentials,
        access_token: str
    ) -> str:
        url = f"{credentials.api_url}/api/v1/users/me"
        response = requests.get(
            url,
            headers=BaseAPIClient.auth_headers(access_token),
            timeout=self.request_timeout,
        )
        response.raise_for_status()

        data = response.json()
        accounts = data.get("id_accounts") if isinstance(data, dict) else None
        if not accounts or not isinstance(accounts, list):
            raise AuthError(
                f"No accounts associated with {credentials.username}",
                status=response.status_code,
                reason=response.reason,
                body=data,
            )

        # Multi-account users always resolve to the first id listed.
        return str(accounts[0])

    def login(
        self,
        credentials: Credentials
    ) -> Session:
        """
        Log in and return a fresh, complete Session.

        The account lookup is only issued once the token call has
        succeeded. On success the session is appended to the store.

        Parameters
        ----------
        credentials : Credentials
            Username, password and API root.

        Returns
        -------
        Session
            Session stamped with the current time.

        Raises
        ------
        AuthError
            If the token endpoint answers 4xx or no account id is found.
        requests.exceptions.RequestException
            On any other HTTP or network failure (not wrapped).
        """
        self.logger.info(
            "Starting login process with credentials: "
            f"{credentials.username}:{'*' * len(credentials.password)}"
        )
        access_token = self._request_token(credentials)

        self.logger.info("Getting account information")
        id_account = self._request_account_id(credentials, access_token)
        self.logger.info(f"Account id: {id_account}")

        session = Session(
            username=credentials.username,
            access_token=access_token,
            id_account=id_account,
            created_at=now_ms(),
        )
        self.session_store.append(session)
        return session
