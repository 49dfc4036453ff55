"""SharePoint REST API client with MSAL authentication."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError

import msal

from sharepoint_listitem.sharepoint.paths import resource_from_url

if TYPE_CHECKING:
    from sharepoint_listitem.config import AppConfig

logger = logging.getLogger(__name__)

AUTHORITY_BASE_URL = "https://login.microsoftonline.com"
ACCEPT_NOMETADATA = "application/json;odata=nometadata"


class SharePointAuthError(Exception):
    """Raised when MSAL token acquisition fails."""


class SharePointApiError(Exception):
    """Raised when the SharePoint REST API returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"SharePoint API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class SharePointClient:
    """Authenticated client for the SharePoint REST API."""

    def __init__(self, client_id: str, client_secret: str, tenant_id: str) -> None:
        """Initialise the MSAL confidential client application.

        Args:
            client_id: Azure AD application (client) ID.
            client_secret: Azure AD application client secret.
            tenant_id: Azure AD tenant ID.
        """
        authority = f"{AUTHORITY_BASE_URL}/{tenant_id}"
        self._app = msal.ConfidentialClientApplication(
            client_id=client_id,
            client_credential=client_secret,
            authority=authority,
        )

    def acquire_token(self, resource: str) -> str:
        """Acquire a Bearer token for a SharePoint resource.

        MSAL keeps acquired tokens in its in-memory cache, so repeated
        calls for the same resource do not hit the identity platform.

        Args:
            resource: Scheme and host of the tenant, e.g. "https://contoso.sharepoint.com".

        Returns:
            Access token string.

        Raises:
            SharePointAuthError: If MSAL cannot acquire a token.
        """
        scopes = [f"{resource}/.default"]
        result: dict[str, Any] = self._app.acquire_token_for_client(scopes=scopes) or {}
        if "access_token" not in result:
            error = result.get("error", "unknown_error")
            description = result.get("error_description", "No description provided")
            logger.error(
                "[acquire_token] MSAL token acquisition failed; resource:%s;error:%s",
                resource,
                error,
            )
            raise SharePointAuthError(f"Token acquisition failed: {error} — {description}")
        return str(result["access_token"])

    def get(self, url: str) -> dict[str, Any]:
        """Perform an authenticated GET request.

        Args:
            url: Absolute SharePoint REST URL.

        Returns:
            Parsed JSON response body as a dict.

        Raises:
            SharePointAuthError: If token acquisition fails.
            SharePointApiError: If the API returns a non-2xx status code.
        """
        return self._send("GET", url)

    def post(self, url: str, body: dict[str, Any] | None = None) -> dict[str, Any]:
        """Perform an authenticated POST request with an optional JSON body.

        Args:
            url: Absolute SharePoint REST URL.
            body: JSON-serializable request body, or None to send no body.

        Returns:
            Parsed JSON response body as a dict (empty when the API returns no content).

        Raises:
            SharePointAuthError: If token acquisition fails.
            SharePointApiError: If the API returns a non-2xx status code.
        """
        return self._send("POST", url, body)

    def _send(
        self, method: str, url: str, body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        token = self.acquire_token(resource_from_url(url))
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": ACCEPT_NOMETADATA,
        }
        data: bytes | None = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        req = urllib_request.Request(url, data=data, headers=headers, method=method)
        logger.debug("[_send] executing web request; method:%s;url:%s", method, url)
        try:
            with urllib_request.urlopen(req) as resp:
                raw = resp.read()
                if not raw:
                    return {}
                return json.loads(raw)  # type: ignore[no-any-return]
        except HTTPError as exc:
            raw = exc.read()
            try:
                # SharePoint nometadata errors: {"odata.error": {"message": {"value": ...}}}
                error = json.loads(raw).get("odata.error", {})
                detail = error.get("message", {}).get("value", exc.reason)
            except Exception:
                detail = exc.reason
            raise SharePointApiError(exc.code, str(detail)) from exc


def sharepoint_client_from_config(config: AppConfig) -> SharePointClient:
    """Construct a SharePointClient from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured SharePointClient instance.
    """
    return SharePointClient(
        client_id=config.client_id,
        client_secret=config.client_secret,
        tenant_id=config.tenant_id,
    )
