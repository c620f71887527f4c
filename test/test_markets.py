from autoshort_python_client.endpoints.markets import MarketsAPI
from autoshort_python_client.errors import LoginTimeoutError
from autoshort_python_client.quotes import QuoteRequest
from autoshort_python_client.session_store import Session
from unittest.mock import MagicMock, patch
import requests
import pytest


API_URL = "https://api.example.com"


@pytest.fixture
def session_provider():
    provider = MagicMock()
    provider.return_value = Session(
        username="trader@example.com",
        access_token="tok1",
        id_account="acc1",
        created_at=1,
    )
    return provider


@pytest.fixture
def api(session_provider):
    return MarketsAPI(api_url=API_URL, session_provider=session_provider)


def test_default_class_url(api):
    url, params = api.quote_url(QuoteRequest("YPFD"))
    assert url == f"{API_URL}/api/v1/markets/tickers/YPFD"
    assert params == {"segment": "C"}


def test_cedear_class_url(api):
    url, params = api.quote_url(QuoteRequest("YPFD", "cedear"))
    assert url == f"{API_URL}/api/v1/markets/ticker/YPFD-0003-C-CT-ARS"
    assert params == {}


@patch.object(MarketsAPI, "make_request")
def test_get_quote_sends_auth_headers(mock_make, api):
    mock_make.return_value = [{"short_ticker": "YPFD", "bids": [], "asks": []}]

    snapshot = api.get_quote(QuoteRequest("YPFD"))

    assert snapshot.short_ticker == "YPFD"
    call = mock_make.call_args.kwargs
    assert call["url"] == f"{API_URL}/api/v1/markets/tickers/YPFD"
    assert call["params"] == {"segment": "C"}
    assert call["headers"]["Authorization"] == "Bearer tok1"
    assert call["headers"]["X-Account-Id"] == "acc1"


@patch.object(MarketsAPI, "make_request")
def test_get_quote_sorts_ladders(mock_make, api):
    mock_make.return_value = {
        "bids": [{"price": 3, "size": 1}, {"price": 1, "size": 1}],
        "asks": [{"price": 9, "size": 1}, {"price": 4, "size": 1}],
    }

    snapshot = api.get_quote(QuoteRequest("YPFD"))

    assert [lvl.price for lvl in snapshot.bids] == [1, 3]
    assert [lvl.price for lvl in snapshot.asks] == [4, 9]


@patch.object(MarketsAPI, "make_request")
def test_get_quote_forwards_wait_options(mock_make, api, session_provider):
    mock_make.return_value = {}
    cancel = MagicMock()

    api.get_quote(QuoteRequest("YPFD"), timeout=5, cancel_event=cancel)

    session_provider.assert_called_once_with(timeout=5, cancel_event=cancel)


@patch.object(MarketsAPI, "make_request")
def test_get_quote_default_wait_uses_provider_default(
    mock_make,
    api,
    session_provider
):
    mock_make.return_value = {}

    api.get_quote(QuoteRequest("YPFD"))

    session_provider.assert_called_once_with(cancel_event=None)


@patch.object(MarketsAPI, "make_request")
def test_get_quote_does_not_dispatch_before_login(
    mock_make,
    api,
    session_provider
):
    session_provider.side_effect = LoginTimeoutError("slow login")

    with pytest.raises(LoginTimeoutError):
        api.get_quote(QuoteRequest("YPFD"))
    mock_make.assert_not_called()


@patch("autoshort_python_client.base_client.requests.get")
def test_make_request_returns_json(mock_get, api):
    resp = MagicMock(status_code=200)
    resp.json.return_value = [{"short_ticker": "YPFD"}]
    mock_get.return_value = resp

    res = api.make_request("url", {"Authorization": "Bearer X"}, {"a": 1})

    assert res == [{"short_ticker": "YPFD"}]
    mock_get.assert_called_once()
    assert mock_get.call_args.kwargs["params"] == {"a": 1}


@patch("autoshort_python_client.base_client.requests.get")
def test_make_request_error_not_retried(mock_get, api):
    resp = MagicMock(status_code=500)
    resp.raise_for_status.side_effect = requests.exceptions.HTTPError(
        "Internal Server Error"
    )
    mock_get.return_value = resp

    with pytest.raises(requests.exceptions.HTTPError):
        api.get_quote(QuoteRequest("YPFD"))
    mock_get.assert_called_once()


@patch("autoshort_python_client.base_client.requests.get")
def test_parse_error_propagates(mock_get, api):
    resp = MagicMock(status_code=200)
    resp.json.side_effect = requests.exceptions.JSONDecodeError(
        "Expecting value", "", 0
    )
    mock_get.return_value = resp

    with pytest.raises(requests.exceptions.JSONDecodeError):
        api.get_quote(QuoteRequest("YPFD"))
