from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
import asyncio
import json
import os
import stat
import keyring
from keyring.errors import KeyringError, PasswordDeleteError
from loguru import logger

from ..domain.app_constants import SERVICE_NAME


class KeyValueStore(ABC):
    """Asynchronous string key-value store used to persist client settings."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        pass


class KeyringStore(KeyValueStore):
    """
    Implementation of KeyValueStore using the system keyring service.
    Used for auth and delete tokens. Keyring backends block, so calls run
    in a worker thread.
    """

    def __init__(self, service_name: str = SERVICE_NAME) -> None:
        self.service_name = service_name

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(keyring.get_password, self.service_name, key)

    async def set(self, key: str, value: str) -> None:
        if value:
            await asyncio.to_thread(keyring.set_password, self.service_name, key, value)
            return
        # Storing "" would leave a credential behind; remove it instead.
        try:
            await asyncio.to_thread(keyring.delete_password, self.service_name, key)
        except PasswordDeleteError:
            pass


class JsonFileStore(KeyValueStore):
    """Plain settings (server URL, upload defaults) in a user-only JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = asyncio.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed settings file {self.path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        mode = stat.S_IRUSR | stat.S_IWUSR
        if os.name != 'nt' and self.path.exists():
            # Files from older versions may be wider; narrow before writing secrets.
            os.chmod(self.path, mode)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            return self._read().get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)


class MemoryStore(KeyValueStore):
    """Process-local store for tests and for environments without a keyring."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value


def keyring_available() -> bool:
    try:
        backend = keyring.get_keyring()
    except KeyringError as e:
        logger.warning(f"Keyring unavailable: {e}")
        return False
    # The fail backend reports priority 0 and raises on every call.
    return getattr(backend, "priority", 0) > 0
