from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from typing import List, Optional, Literal
from datetime import datetime, timezone

from .types import FileName

# --- Core Enums & Types ---

UploadKind = Literal['text', 'file', 'image', 'url', 'remote']
SortField = Literal['name', 'size', 'expiration']
SortDirection = Literal['asc', 'desc']

# --- Upload Models ---

class UploadOptions(BaseModel):
    model_config = ConfigDict(frozen=True)
    expiry: Optional[str] = None  # Server grammar ("1h", "10min"), passed through verbatim
    oneshot: bool = False

class UploadRecord(BaseModel):
    """One row of the server's /list response."""
    file_name: FileName
    file_size: int = Field(ge=0)
    expires_at_utc: Optional[datetime] = None

    @field_validator("expires_at_utc")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Server timestamps carry no offset; they are UTC by contract.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

UploadRecordList = TypeAdapter(List[UploadRecord])

# --- Client Configuration ---

class ClientConfig(BaseModel):
    """
    Everything an operation needs to reach the server.
    Passed explicitly into the services; never held in module globals.
    """
    model_config = ConfigDict(frozen=True)
    server_url: str = ""
    auth_token: str = ""
    delete_token: str = ""
    default_expiry: Optional[str] = None
    default_oneshot: bool = False

    def upload_options(self, expiry: Optional[str] = None, oneshot: Optional[bool] = None) -> UploadOptions:
        """Merge per-call overrides with the stored defaults."""
        chosen_expiry = (expiry or "").strip() or (self.default_expiry or "").strip() or None
        return UploadOptions(
            expiry=chosen_expiry,
            oneshot=self.default_oneshot if oneshot is None else oneshot,
        )

    def redacted(self) -> dict:
        data = self.model_dump()
        for key in ("auth_token", "delete_token"):
            if data[key]:
                data[key] = "[REDACTED]"
        return data
