"""
Loads and saves the ClientConfig.

The server URL and upload defaults live in a plain store; the auth and
delete tokens live in a secure store. Both are injected.
"""

from typing import Optional
import asyncio
from loguru import logger

from ..config.settings import ServerOverrides
from ..domain.models import ClientConfig
from ..domain.urls import is_valid_server_url
from ..infrastructure.credentials import KeyValueStore

KEY_SERVER_URL = "serverUrl"
KEY_AUTH_TOKEN = "authToken"
KEY_DELETE_TOKEN = "deleteToken"
KEY_DEFAULT_EXPIRY = "defaultExpiry"
KEY_DEFAULT_ONESHOT = "defaultOneshot"


class InvalidSettingsError(ValueError):
    pass


def _as_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


class SettingsRepository:
    def __init__(self, plain_store: KeyValueStore, secure_store: KeyValueStore,
                 overrides: Optional[ServerOverrides] = None) -> None:
        self.plain = plain_store
        self.secure = secure_store
        self.overrides = overrides or ServerOverrides()

    async def load(self) -> ClientConfig:
        """Stored config with environment overrides applied."""
        return self._apply_overrides(await self.load_stored())

    async def load_stored(self) -> ClientConfig:
        """Stored config only. Edits start from this so overrides never reach the stores."""
        try:
            server_url, expiry, oneshot, auth_token, delete_token = await asyncio.gather(
                self.plain.get(KEY_SERVER_URL),
                self.plain.get(KEY_DEFAULT_EXPIRY),
                self.plain.get(KEY_DEFAULT_ONESHOT),
                self.secure.get(KEY_AUTH_TOKEN),
                self.secure.get(KEY_DELETE_TOKEN),
            )
        except Exception as e:
            logger.error(f"Failed to load settings: {e}")
            return ClientConfig()

        return ClientConfig(
            server_url=server_url or "",
            auth_token=auth_token or "",
            delete_token=delete_token or "",
            default_expiry=expiry or None,
            default_oneshot=_as_bool(oneshot),
        )

    async def save(self, config: ClientConfig) -> ClientConfig:
        server_url = config.server_url.strip()
        if not server_url:
            raise InvalidSettingsError("Server URL cannot be empty")
        if not is_valid_server_url(server_url):
            raise InvalidSettingsError("Invalid server URL format")

        if not config.auth_token.strip():
            logger.warning("If your server requires authentication, you need to provide an auth token")
        if not config.delete_token.strip():
            logger.warning("Without delete token you won't be able to delete pastes")

        cleaned = config.model_copy(update={
            "server_url": server_url,
            "auth_token": config.auth_token.strip(),
            "delete_token": config.delete_token.strip(),
            "default_expiry": (config.default_expiry or "").strip() or None,
        })
        await asyncio.gather(
            self.plain.set(KEY_SERVER_URL, cleaned.server_url),
            self.plain.set(KEY_DEFAULT_EXPIRY, cleaned.default_expiry or ""),
            self.plain.set(KEY_DEFAULT_ONESHOT, "true" if cleaned.default_oneshot else "false"),
            self.secure.set(KEY_AUTH_TOKEN, cleaned.auth_token),
            self.secure.set(KEY_DELETE_TOKEN, cleaned.delete_token),
        )
        logger.info(f"Settings saved: {cleaned.redacted()}")
        return cleaned

    def _apply_overrides(self, config: ClientConfig) -> ClientConfig:
        update = {k: v for k, v in self.overrides.model_dump().items() if v}
        return config.model_copy(update=update) if update else config
