# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
# pyright: reportUnknownVariableType=false, reportMissingParameterType=false
# pyright: reportUnknownArgumentType=false
import io
from unittest.mock import Mock, patch

import pytest
import requests

from courier.networking.cancel import CancelToken
from courier.networking.config import TransportConfig
from courier.networking.errors import (
    CanceledError,
    RequestTimeoutError,
    TransportError,
)
from courier.networking.transport import RequestsAdapter, default_validate_status


@pytest.fixture
def mock_request():
    with patch("requests.Session.request") as mock:
        yield mock


@pytest.fixture
def transport():
    return RequestsAdapter(
        TransportConfig(user_agent="TestAgent/1.0", default_headers={"X-Test": "yes"})
    )


def _mock_response(
    *,
    text: str = "",
    content: bytes = b"",
    status: int = 200,
    reason: str = "OK",
):
    response = Mock()
    response.text = text
    response.content = content
    response.status_code = status
    response.reason = reason
    response.headers = {"Content-Type": "application/json"}
    return response


def _config(**overrides):
    config = {
        "url": "/items",
        "method": "get",
        "base_url": "http://example.com",
        "headers": {"Accept": "application/json"},
        "validate_status": default_validate_status,
    }
    config.update(overrides)
    return config


def test_init_sets_user_agent_and_default_headers(transport):
    assert transport._session.headers["User-Agent"] == "TestAgent/1.0"
    assert transport._session.headers["X-Test"] == "yes"


@pytest.mark.asyncio
async def test_get_returns_raw_response(mock_request, transport):
    mock_request.return_value = _mock_response(text='{"a": 1}')
    config = _config(params={"q": "x"})

    response = await transport(config)

    assert response.data == '{"a": 1}'
    assert response.status == 200
    assert response.status_text == "OK"
    assert response.headers == {"Content-Type": "application/json"}
    assert response.config is config
    assert response.request is mock_request.return_value.request
    mock_request.assert_called_once_with(
        "GET",
        "http://example.com/items?q=x",
        headers={"Accept": "application/json"},
        data=None,
        files=None,
        timeout=None,
        auth=None,
        allow_redirects=True,
        verify=True,
    )


@pytest.mark.asyncio
async def test_request_options_are_forwarded(mock_request, transport):
    mock_request.return_value = _mock_response(content=b"\x00", status=201)

    response = await transport(
        _config(
            method="post",
            data="a=1",
            timeout=2.5,
            auth={"username": "u", "password": "p"},
            max_redirects=0,
            verify=False,
            response_type="bytes",
        )
    )

    assert response.data == b"\x00"
    _, kwargs = mock_request.call_args
    assert mock_request.call_args.args[0] == "POST"
    assert kwargs["data"] == "a=1"
    assert kwargs["timeout"] == 2.5
    assert kwargs["auth"] == ("u", "p")
    assert kwargs["allow_redirects"] is False
    assert kwargs["verify"] is False


@pytest.mark.asyncio
async def test_session_timeout_is_used_when_request_has_none(mock_request):
    transport = RequestsAdapter(
        TransportConfig(connect_timeout_seconds=1.0, read_timeout_seconds=3.0)
    )
    mock_request.return_value = _mock_response()

    await transport(_config(timeout=0))

    assert mock_request.call_args.kwargs["timeout"] == (1.0, 3.0)


@pytest.mark.asyncio
async def test_multipart_mapping_is_sent_as_form_fields(mock_request, transport):
    mock_request.return_value = _mock_response()
    upload = io.BytesIO(b"file body")

    await transport(
        _config(
            method="post",
            headers={"Content-Type": "multipart/form-data"},
            data={"name": "ada", "file": upload},
        )
    )

    kwargs = mock_request.call_args.kwargs
    assert kwargs["data"] == {"name": "ada"}
    assert kwargs["files"] == {"file": upload}
    assert "Content-Type" not in kwargs["headers"]


@pytest.mark.asyncio
async def test_status_outside_validator_rejects_with_raw_response(mock_request, transport):
    mock_request.return_value = _mock_response(text='{"error": "nope"}', status=404, reason="Not Found")

    with pytest.raises(TransportError) as excinfo:
        await transport(_config())

    error = excinfo.value
    assert error.code == "ERR_BAD_REQUEST"
    assert error.response.status == 404
    assert error.response.data == '{"error": "nope"}'
    assert error.status == 404


@pytest.mark.asyncio
async def test_timeout_maps_to_request_timeout_error(mock_request, transport):
    mock_request.side_effect = requests.exceptions.Timeout("Timed out")

    with pytest.raises(RequestTimeoutError) as excinfo:
        await transport(_config())
    assert excinfo.value.code == "ECONNABORTED"

    with pytest.raises(RequestTimeoutError) as excinfo:
        await transport(_config(transitional={"clarify_timeout_error": True}))
    assert excinfo.value.code == "ETIMEDOUT"


@pytest.mark.asyncio
async def test_connection_error_maps_to_network_error(mock_request, transport):
    mock_request.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(TransportError) as excinfo:
        await transport(_config())

    assert excinfo.value.code == "ERR_NETWORK"
    assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectionError)


@pytest.mark.asyncio
async def test_too_many_redirects_is_reported(mock_request, transport):
    mock_request.side_effect = requests.exceptions.TooManyRedirects("loop")

    with pytest.raises(TransportError) as excinfo:
        await transport(_config())

    assert excinfo.value.code == "ERR_FR_TOO_MANY_REDIRECTS"


@pytest.mark.asyncio
async def test_generic_request_exception_is_a_transport_error(mock_request, transport):
    mock_request.side_effect = requests.exceptions.RequestException("boom")

    with pytest.raises(TransportError) as excinfo:
        await transport(_config())

    assert not isinstance(excinfo.value, RequestTimeoutError)
    assert mock_request.call_count == 1


@pytest.mark.asyncio
async def test_cancelled_request_is_never_sent(mock_request, transport):
    token, cancel = CancelToken.source()
    cancel()

    with pytest.raises(CanceledError):
        await transport(_config(cancel_token=token))

    mock_request.assert_not_called()


@pytest.mark.asyncio
async def test_cancellation_during_exchange_discards_response(mock_request, transport):
    token, cancel = CancelToken.source()

    def send(*args, **kwargs):
        cancel("too late")
        return _mock_response()

    mock_request.side_effect = send

    with pytest.raises(CanceledError, match="too late"):
        await transport(_config(cancel_token=token))
