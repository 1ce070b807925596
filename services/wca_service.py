import logging
import httpx
from urllib.parse import urlencode
from typing import Optional
from core.config import settings
from schemas.auth import WcaUserInfo

logger = logging.getLogger(__name__)


class WcaService:
    def __init__(self):
        self.client_id = settings.wca_client_id
        self.client_secret = settings.wca_client_secret
        self.redirect_uri = settings.wca_redirect_uri
        self.scope = settings.wca_scope
        self.auth_url = settings.wca_auth_url
        self.token_url = settings.wca_token_url
        self.api_base_url = settings.wca_api_base_url

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def get_authorization_url(self, state: Optional[str] = None) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.scope,
        }
        if state:
            params["state"] = state

        return f"{self.auth_url}?{urlencode(params)}"

    async def exchange_code_for_token(self, code: str) -> Optional[str]:
        async with httpx.AsyncClient(timeout=10) as client:
            payload = {
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "code": code,
            }

            response = await client.post(self.token_url, json=payload)

            if response.status_code == 200:
                return response.json().get("access_token")
            logger.warning(f"WCA token exchange failed ({response.status_code}): {response.text}")
            return None

    async def get_user_info(self, access_token: str) -> Optional[WcaUserInfo]:
        async with httpx.AsyncClient(timeout=10) as client:
            headers = {"Authorization": f"Bearer {access_token}"}
            response = await client.get(f"{self.api_base_url}/me", headers=headers)

            if response.status_code == 200:
                me = response.json().get("me", {})
                avatar = me.get("avatar")
                if isinstance(avatar, dict):
                    avatar = avatar.get("url")
                return WcaUserInfo(
                    id=me.get("id"),
                    wca_id=me.get("wca_id"),
                    name=me.get("name", ""),
                    country_iso2=me.get("country_iso2"),
                    avatar=avatar,
                    email=me.get("email"),
                    gender=me.get("gender"),
                )
            logger.warning(f"WCA profile request failed ({response.status_code})")
            return None


wca_service = WcaService()
