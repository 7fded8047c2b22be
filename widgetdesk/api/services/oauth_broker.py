# widgetdesk/api/services/oauth_broker.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import requests

from widgetdesk.core.config import settings
from widgetdesk.core.exceptions import UpstreamError, ValidationError
from widgetdesk.core.logging_config import token_tail

logger = logging.getLogger(__name__)

# escopos OAuth por provedor
PROVIDER_SCOPES: Dict[str, List[str]] = {
    "google": [
        "openid",
        "email",
        "https://www.googleapis.com/auth/calendar",
        "https://www.googleapis.com/auth/gmail.send",
    ],
    "facebook": [
        "pages_show_list",
        "pages_manage_metadata",
        "pages_messaging",
        "pages_read_engagement",
    ],
    "instagram": [
        "instagram_basic",
        "instagram_manage_messages",
    ],
}


def ensure_provider(provider: str) -> str:
    if provider not in PROVIDER_SCOPES:
        raise ValidationError("Invalid provider")
    return provider


class OAuthBrokerClient:
    """
    Cliente do broker OAuth externo.

    O broker guarda os tokens reais dos provedores; aqui só trafegam
    token_refs e access tokens de curta duração (nunca persistidos).
    """

    def __init__(self, base_url: str = None, client_token: str = None, timeout: float = None):
        self.base_url = (base_url or settings.OAUTH_BROKER_BASE_URL).rstrip("/")
        self.client_token = client_token or settings.OAUTH_BROKER_TOKEN
        self.timeout = timeout or settings.OAUTH_BROKER_TIMEOUT

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.client_token}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            r = requests.request(
                method=method.upper(),
                url=url,
                headers=self._headers(),
                json=json,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("BROKER_HTTP_ERROR: method=%s path=%s error=%s", method.upper(), path, e)
            raise UpstreamError("OAuth broker unavailable")

        if r.status_code >= 300:
            logger.error(
                "BROKER_HTTP_FAIL: method=%s path=%s status=%s", method.upper(), path, r.status_code
            )
            raise UpstreamError(f"OAuth broker returned {r.status_code}")

        try:
            data = r.json()
        except ValueError:
            raise UpstreamError("OAuth broker returned an invalid response")

        if not isinstance(data, dict):
            raise UpstreamError("OAuth broker returned an invalid response")
        return data

    # ======================
    # Fluxo OAuth
    # ======================

    def authorize_url(self, provider: str, state: str, redirect_uri: str) -> str:
        ensure_provider(provider)
        params = urlencode({
            "client_token": self.client_token,
            "provider": provider,
            "scopes": ",".join(PROVIDER_SCOPES[provider]),
            "state": state,
            "redirect_uri": redirect_uri,
        })
        return f"{self.base_url}/oauth/authorize?{params}"

    def exchange_code(self, provider: str, code: str) -> Dict[str, Any]:
        data = self._request("POST", "/oauth/token", json={
            "client_token": self.client_token,
            "code": code,
            "provider": provider,
        })

        token_ref = data.get("token_ref")
        if not token_ref:
            raise UpstreamError("OAuth broker did not return a token reference")

        logger.info("BROKER_CODE_EXCHANGED: provider=%s token_ref=%s", provider, token_tail(token_ref))
        return {
            "token_ref": token_ref,
            "external_id": data.get("external_id"),
            "scopes": data.get("scopes") or PROVIDER_SCOPES.get(provider, []),
            "metadata": data.get("metadata") or {},
        }

    # ======================
    # Tokens
    # ======================

    def mint_access_token(self, token_ref: str) -> Dict[str, Any]:
        data = self._request("GET", f"/tokens/{token_ref}/access")
        access_token = data.get("access_token")
        if not access_token:
            raise UpstreamError("OAuth broker did not return an access token")
        return {
            "access_token": access_token,
            "expires_at": data.get("expires_at"),
        }


def get_oauth_broker() -> OAuthBrokerClient:
    return OAuthBrokerClient()
