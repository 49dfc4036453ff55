"""Unit tests for sharepoint/client.py — MSAL auth and HTTP calls."""

import json
from io import BytesIO
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError

import pytest

from sharepoint_listitem.config import AppConfig
from sharepoint_listitem.sharepoint.client import (
    SharePointApiError,
    SharePointAuthError,
    SharePointClient,
    sharepoint_client_from_config,
)

WEB_URL = "https://contoso.sharepoint.com/sites/team"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_client() -> SharePointClient:
    """Return a SharePointClient with a mocked MSAL app."""
    with patch("sharepoint_listitem.sharepoint.client.msal.ConfidentialClientApplication"):
        client = SharePointClient(
            client_id="test-client-id",
            client_secret="test-secret",
            tenant_id="test-tenant-id",
        )
    return client


def _mock_token_success(client: SharePointClient) -> None:
    """Configure the MSAL mock to return a valid token."""
    client._app.acquire_token_for_client.return_value = {  # type: ignore[attr-defined]
        "access_token": "fake-token-abc"
    }


def _mock_token_failure(client: SharePointClient) -> None:
    """Configure the MSAL mock to simulate token acquisition failure."""
    client._app.acquire_token_for_client.return_value = {  # type: ignore[attr-defined]
        "error": "invalid_client",
        "error_description": "Client secret is wrong",
    }


def _mock_response(body: bytes) -> MagicMock:
    mock_response = MagicMock()
    mock_response.read.return_value = body
    mock_response.__enter__ = lambda s: s
    mock_response.__exit__ = MagicMock(return_value=False)
    return mock_response


def _http_error(code: int, msg: str, body: bytes) -> HTTPError:
    return HTTPError(
        url=f"{WEB_URL}/_api/web",
        code=code,
        msg=msg,
        hdrs=MagicMock(),  # type: ignore[arg-type]
        fp=BytesIO(body),
    )


# ---------------------------------------------------------------------------
# Constructor tests
# ---------------------------------------------------------------------------


class TestSharePointClientInit:
    def test_msal_app_created_with_correct_authority(self) -> None:
        with patch(
            "sharepoint_listitem.sharepoint.client.msal.ConfidentialClientApplication"
        ) as mock_msal:
            SharePointClient("cid", "csecret", "tid-001")
            mock_msal.assert_called_once_with(
                client_id="cid",
                client_credential="csecret",
                authority="https://login.microsoftonline.com/tid-001",
            )

    def test_from_config_passes_credentials(self) -> None:
        config = AppConfig(client_id="cid", client_secret="cs", tenant_id="tid")
        with patch(
            "sharepoint_listitem.sharepoint.client.msal.ConfidentialClientApplication"
        ) as mock_msal:
            sharepoint_client_from_config(config)
        mock_msal.assert_called_once_with(
            client_id="cid",
            client_credential="cs",
            authority="https://login.microsoftonline.com/tid",
        )


# ---------------------------------------------------------------------------
# acquire_token tests
# ---------------------------------------------------------------------------


class TestAcquireToken:
    def test_returns_token_on_success(self) -> None:
        client = _make_client()
        _mock_token_success(client)
        token = client.acquire_token("https://contoso.sharepoint.com")
        assert token == "fake-token-abc"

    def test_requests_default_scope_for_resource(self) -> None:
        client = _make_client()
        _mock_token_success(client)
        client.acquire_token("https://contoso.sharepoint.com")
        client._app.acquire_token_for_client.assert_called_once_with(  # type: ignore[attr-defined]
            scopes=["https://contoso.sharepoint.com/.default"]
        )

    def test_raises_auth_error_on_failure(self) -> None:
        client = _make_client()
        _mock_token_failure(client)
        with pytest.raises(SharePointAuthError, match="invalid_client"):
            client.acquire_token("https://contoso.sharepoint.com")

    def test_raises_auth_error_when_msal_returns_none(self) -> None:
        client = _make_client()
        client._app.acquire_token_for_client.return_value = None  # type: ignore[attr-defined]
        with pytest.raises(SharePointAuthError, match="unknown_error"):
            client.acquire_token("https://contoso.sharepoint.com")


# ---------------------------------------------------------------------------
# get() tests
# ---------------------------------------------------------------------------


class TestSharePointClientGet:
    def test_get_sends_url_and_headers(self) -> None:
        client = _make_client()
        _mock_token_success(client)
        response_data = {"value": [{"Name": "Item"}]}

        with patch("sharepoint_listitem.sharepoint.client.urllib_request.urlopen") as mock_urlopen:
            mock_urlopen.return_value = _mock_response(json.dumps(response_data).encode())
            result = client.get(f"{WEB_URL}/_api/web/lists/getByTitle('Tasks')/contenttypes")

        assert result == response_data
        req = mock_urlopen.call_args[0][0]
        assert req.full_url == f"{WEB_URL}/_api/web/lists/getByTitle('Tasks')/contenttypes"
        assert req.get_method() == "GET"
        assert req.get_header("Authorization") == "Bearer fake-token-abc"
        assert req.get_header("Accept") == "application/json;odata=nometadata"
        assert req.data is None

    def test_get_acquires_token_for_url_host(self) -> None:
        client = _make_client()
        _mock_token_success(client)

        with patch("sharepoint_listitem.sharepoint.client.urllib_request.urlopen") as mock_urlopen:
            mock_urlopen.return_value = _mock_response(b"{}")
            client.get(f"{WEB_URL}/_api/web")

        client._app.acquire_token_for_client.assert_called_once_with(  # type: ignore[attr-defined]
            scopes=["https://contoso.sharepoint.com/.default"]
        )

    def test_get_raises_api_error_with_odata_message(self) -> None:
        client = _make_client()
        _mock_token_success(client)
        error_body = json.dumps(
            {"odata.error": {"code": "-2147024894", "message": {"value": "File Not Found."}}}
        ).encode()

        with (
            patch(
                "sharepoint_listitem.sharepoint.client.urllib_request.urlopen",
                side_effect=_http_error(404, "Not Found", error_body),
            ),
            pytest.raises(SharePointApiError) as exc_info,
        ):
            client.get(f"{WEB_URL}/_api/web/GetFolderByServerRelativePath(decodedurl='/x')")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "File Not Found."

    def test_get_falls_back_to_reason_for_unparseable_body(self) -> None:
        client = _make_client()
        _mock_token_success(client)

        with (
            patch(
                "sharepoint_listitem.sharepoint.client.urllib_request.urlopen",
                side_effect=_http_error(500, "Internal Server Error", b"<html>oops</html>"),
            ),
            pytest.raises(SharePointApiError) as exc_info,
        ):
            client.get(f"{WEB_URL}/_api/web")

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Internal Server Error"

    def test_get_raises_auth_error_before_request(self) -> None:
        client = _make_client()
        _mock_token_failure(client)

        with (
            patch("sharepoint_listitem.sharepoint.client.urllib_request.urlopen") as mock_urlopen,
            pytest.raises(SharePointAuthError),
        ):
            client.get(f"{WEB_URL}/_api/web")

        mock_urlopen.assert_not_called()


# ---------------------------------------------------------------------------
# post() tests
# ---------------------------------------------------------------------------


class TestSharePointClientPost:
    def test_post_sends_json_body(self) -> None:
        client = _make_client()
        _mock_token_success(client)
        body = {"formValues": [{"FieldName": "Title", "FieldValue": "Hello"}]}

        with patch("sharepoint_listitem.sharepoint.client.urllib_request.urlopen") as mock_urlopen:
            mock_urlopen.return_value = _mock_response(b'{"value": []}')
            url = f"{WEB_URL}/_api/web/lists/x/AddValidateUpdateItemUsingPath()"
            result = client.post(url, body)

        assert result == {"value": []}
        req = mock_urlopen.call_args[0][0]
        assert req.get_method() == "POST"
        assert req.get_header("Content-type") == "application/json"
        assert json.loads(req.data) == body

    def test_post_without_body_sends_no_data(self) -> None:
        client = _make_client()
        _mock_token_success(client)

        with patch("sharepoint_listitem.sharepoint.client.urllib_request.urlopen") as mock_urlopen:
            mock_urlopen.return_value = _mock_response(b"")
            result = client.post(f"{WEB_URL}/_api/web/folders")

        assert result == {}
        req = mock_urlopen.call_args[0][0]
        assert req.get_method() == "POST"
        assert req.data is None
        assert req.get_header("Content-type") is None

    def test_post_raises_api_error_on_403(self) -> None:
        client = _make_client()
        _mock_token_success(client)
        error_body = json.dumps({"odata.error": {"message": {"value": "Access denied."}}}).encode()

        with (
            patch(
                "sharepoint_listitem.sharepoint.client.urllib_request.urlopen",
                side_effect=_http_error(403, "Forbidden", error_body),
            ),
            pytest.raises(SharePointApiError) as exc_info,
        ):
            client.post(f"{WEB_URL}/_api/web/folders", {"a": 1})

        assert exc_info.value.status_code == 403
        assert "Access denied." in exc_info.value.message


# ---------------------------------------------------------------------------
# SharePointApiError tests
# ---------------------------------------------------------------------------


class TestSharePointApiError:
    def test_status_code_and_message_stored(self) -> None:
        err = SharePointApiError(403, "Access denied")
        assert err.status_code == 403
        assert err.message == "Access denied"

    def test_str_includes_status_code(self) -> None:
        err = SharePointApiError(429, "Too many requests")
        assert "429" in str(err)
