from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import os
from pathlib import Path

from ..domain.app_constants import APP_DIR_NAME, ENV_PREFIX, SERVICE_NAME


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: Optional[Path] = None


class StorageConfig(BaseModel):
    keyring_service: str = SERVICE_NAME
    settings_dir: Optional[Path] = None


class ServerOverrides(BaseModel):
    """Values that, when set in the environment, win over the stored settings."""
    server_url: Optional[str] = None
    auth_token: Optional[str] = None
    delete_token: Optional[str] = None


class AppSettings(BaseSettings):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    server: ServerOverrides = Field(default_factory=ServerOverrides)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"
    )

    def settings_dir(self) -> Path:
        if self.storage.settings_dir is not None:
            return self.storage.settings_dir
        return get_config_dir()


def get_config_dir() -> Path:
    """Per-user configuration directory (APPDATA on Windows, ~/.config elsewhere)."""
    if os.name == 'nt':
        base = Path(os.environ.get('APPDATA', Path.home()))
    else:
        base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))
    return base / APP_DIR_NAME
