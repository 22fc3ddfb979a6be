# Google OAuth 2.0 client for delegated sign-in
# Authorization-code flow: consent URL -> code exchange -> userinfo

import logging
import secrets
from typing import Optional
from urllib.parse import urlencode

import httpx

from auth.utils import create_state_token, verify_state_token
from config.app_config import GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_CALLBACK_URL
from core.errors import AppError, BadRequestError, ErrorCode, UnauthorizedError

logger = logging.getLogger(__name__)


class GoogleOAuthConfig:
    """Google OAuth endpoints and credentials"""
    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
    SCOPES = ["openid", "email", "profile"]
    TIMEOUT_SECONDS = 10.0


class GoogleProfile(dict):
    """Userinfo document returned by Google."""

    @property
    def google_id(self) -> Optional[str]:
        return self.get("sub")

    @property
    def email(self) -> Optional[str]:
        return self.get("email")

    @property
    def email_verified(self) -> bool:
        return bool(self.get("email_verified", False))

    @property
    def given_name(self) -> str:
        return self.get("given_name") or ""

    @property
    def family_name(self) -> str:
        return self.get("family_name") or ""

    @property
    def picture(self) -> str:
        return self.get("picture") or ""


class GoogleOAuthClient:
    def __init__(
        self,
        client_id: str = GOOGLE_CLIENT_ID,
        client_secret: str = GOOGLE_CLIENT_SECRET,
        redirect_uri: str = GOOGLE_CALLBACK_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def authorization_url(self) -> str:
        """Consent screen URL carrying a signed, short-lived state value."""
        if not self.is_configured:
            raise AppError("Google sign-in is not configured", code=ErrorCode.OAUTH_NOT_CONFIGURED, status_code=503)

        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(GoogleOAuthConfig.SCOPES),
            "state": create_state_token(secrets.token_urlsafe(16)),
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{GoogleOAuthConfig.AUTHORIZE_URL}?{urlencode(params)}"

    async def fetch_profile(self, code: str, state: str) -> GoogleProfile:
        """Exchange the authorization code and return the verified user profile."""
        if not verify_state_token(state):
            raise BadRequestError("Invalid OAuth state", code=ErrorCode.OAUTH_FAILED)

        async with httpx.AsyncClient(timeout=GoogleOAuthConfig.TIMEOUT_SECONDS, transport=self.transport) as client:
            try:
                response = await client.post(GoogleOAuthConfig.TOKEN_URL, data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                })
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.error(f"Google token exchange failed: {e}")
                raise UnauthorizedError("Google sign-in failed", code=ErrorCode.OAUTH_FAILED)

            access_token = response.json().get("access_token")
            if not access_token:
                raise UnauthorizedError("Google did not return an access token", code=ErrorCode.OAUTH_FAILED)

            try:
                response = await client.get(
                    GoogleOAuthConfig.USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.error(f"Google userinfo request failed: {e}")
                raise UnauthorizedError("Google sign-in failed", code=ErrorCode.OAUTH_FAILED)

        profile = GoogleProfile(response.json())
        if not profile.email:
            raise UnauthorizedError("No email found in Google profile", code=ErrorCode.OAUTH_FAILED)
        if not profile.email_verified:
            raise UnauthorizedError("Google account email is not verified", code=ErrorCode.OAUTH_FAILED)
        return profile


def get_google_client() -> GoogleOAuthClient:
    """FastAPI dependency; overridden in tests."""
    return GoogleOAuthClient()
