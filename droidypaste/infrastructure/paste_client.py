import asyncio
from contextlib import ExitStack
from typing import IO, Dict, List, Optional, Union
from urllib.parse import urlsplit
from urllib.request import url2pathname

import httpx
from loguru import logger
from pydantic import ValidationError

from ..domain.app_constants import (
    APP_NAME, APP_VERSION, REQUEST_TIMEOUT_SECONDS, LIST_PATH,
    FIELD_FILE, FIELD_ONESHOT, FIELD_URL, FIELD_ONESHOT_URL, FIELD_REMOTE,
    TEXT_UPLOAD_NAME, TEXT_CONTENT_TYPE, BINARY_CONTENT_TYPE,
)
from ..domain.errors import (
    PasteClientError, ConfigurationError, RequestTimeout, NetworkUnavailable,
    ServerError, FeatureDisabledError, MissingDeleteTokenError, InvalidResponse,
    UnknownError,
)
from ..domain.models import UploadOptions, UploadRecord, UploadRecordList
from ..domain.urls import normalize_server_url, join_path, filename_from_source

FileSource = Union[str, IO[bytes]]


def build_headers(auth_token: Optional[str] = None, expiry: Optional[str] = None,
                  identity_encoding: bool = False) -> Dict[str, str]:
    headers = {"Accept": "*/*"}
    if identity_encoding:
        headers["Accept-Encoding"] = "identity"
    if auth_token:
        headers["Authorization"] = auth_token
    if expiry:
        headers["expire"] = expiry
    return headers


def classify_error(error: BaseException) -> PasteClientError:
    """Map a transport or unexpected exception onto the client error taxonomy."""
    if isinstance(error, PasteClientError):
        return error
    if isinstance(error, (asyncio.TimeoutError, httpx.TimeoutException)):
        return RequestTimeout()
    if isinstance(error, (httpx.NetworkError, httpx.ProxyError, httpx.UnsupportedProtocol)):
        return NetworkUnavailable()
    return UnknownError(str(error) or type(error).__name__)


def _local_path(source: str) -> str:
    """Filesystem path for a plain path or a file:// URI."""
    if "://" not in source:
        return source
    parts = urlsplit(source)
    if parts.scheme != "file":
        raise UnknownError(f"Cannot read {parts.scheme}:// sources, pass a local path or file:// URI")
    return url2pathname(parts.path)


def _require_server(server_url: str) -> None:
    if not server_url:
        raise ConfigurationError()


def _error_message(response: httpx.Response) -> str:
    return response.text or response.reason_phrase or f"HTTP {response.status_code}"


class PasteServiceClient:
    """
    Client for a rustypaste-compatible paste server.

    Every public method performs exactly one HTTP request, bounded to
    REQUEST_TIMEOUT_SECONDS of wall-clock time, and either returns the
    result or raises a PasteClientError subclass. Nothing is retried.

    `transport` is only meant for tests (httpx.MockTransport); by default
    each call opens and closes its own connection pool.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._transport = transport

    # --- Uploads ---

    async def upload_text(self, content: str, server_url: str, auth_token: Optional[str] = None,
                          options: Optional[UploadOptions] = None) -> str:
        _require_server(server_url)
        options = options or UploadOptions()
        field = FIELD_ONESHOT if options.oneshot else FIELD_FILE
        files = {field: (TEXT_UPLOAD_NAME, content.encode("utf-8"), TEXT_CONTENT_TYPE)}
        headers = build_headers(auth_token, options.expiry, identity_encoding=True)
        response = await self._send("POST", normalize_server_url(server_url), headers, files=files)
        return self._expect_upload_url(response)

    async def upload_file(self, source: FileSource, server_url: str, auth_token: Optional[str] = None,
                          options: Optional[UploadOptions] = None) -> str:
        _require_server(server_url)
        options = options or UploadOptions()
        field = FIELD_ONESHOT if options.oneshot else FIELD_FILE
        headers = build_headers(auth_token, options.expiry)

        with ExitStack() as stack:
            if isinstance(source, str):
                filename = filename_from_source(source)
                try:
                    stream = stack.enter_context(open(_local_path(source), "rb"))
                except OSError as e:
                    raise classify_error(e) from e
            else:
                filename = filename_from_source(str(getattr(source, "name", "") or ""))
                stream = source
            files = {field: (filename, stream, BINARY_CONTENT_TYPE)}
            response = await self._send("POST", normalize_server_url(server_url), headers, files=files)
        return self._expect_upload_url(response)

    async def shorten_url(self, target_url: str, server_url: str, auth_token: Optional[str] = None,
                          options: Optional[UploadOptions] = None) -> str:
        _require_server(server_url)
        options = options or UploadOptions()
        field = FIELD_ONESHOT_URL if options.oneshot else FIELD_URL
        headers = build_headers(auth_token, options.expiry)
        response = await self._send("POST", normalize_server_url(server_url), headers,
                                    files={field: (None, target_url)})
        return self._expect_upload_url(response)

    async def upload_from_remote_url(self, remote_url: str, server_url: str,
                                     auth_token: Optional[str] = None,
                                     options: Optional[UploadOptions] = None) -> str:
        # The server has no one-shot variant of the remote field; oneshot is ignored here.
        _require_server(server_url)
        options = options or UploadOptions()
        headers = build_headers(auth_token, options.expiry)
        response = await self._send("POST", normalize_server_url(server_url), headers,
                                    files={FIELD_REMOTE: (None, remote_url)})
        return self._expect_upload_url(response)

    # --- Management ---

    async def list_uploads(self, server_url: str, auth_token: Optional[str] = None) -> List[UploadRecord]:
        _require_server(server_url)
        response = await self._send("GET", join_path(server_url, LIST_PATH), build_headers(auth_token))

        if response.status_code == 404:
            raise FeatureDisabledError(status_code=404)
        if not response.is_success:
            raise ServerError(response.status_code, _error_message(response))

        try:
            return UploadRecordList.validate_json(response.content)
        except ValidationError as e:
            logger.warning(f"Unparseable list response ({len(response.content)} bytes): {e.error_count()} errors")
            raise InvalidResponse() from e

    async def delete_file(self, file_name: str, server_url: str, delete_token: str) -> None:
        _require_server(server_url)
        # Sent even when empty: the server decides whether deletion is allowed.
        headers = {"Accept": "*/*", "Authorization": delete_token or ""}
        response = await self._send("DELETE", join_path(server_url, file_name), headers)

        if response.status_code == 404:
            raise MissingDeleteTokenError(status_code=404)
        if not response.is_success:
            raise ServerError(response.status_code, _error_message(response))

    # --- Transport ---

    def _expect_upload_url(self, response: httpx.Response) -> str:
        if response.is_success:
            return response.text
        logger.error(f"Server response: {response.status_code} {response.text[:200]}")
        raise ServerError(response.status_code, _error_message(response))

    async def _send(self, method: str, url: str, headers: Dict[str, str], **kwargs) -> httpx.Response:
        logger.debug(f"{method} {url}")
        headers.setdefault("User-Agent", f"{APP_NAME}/{APP_VERSION}")
        try:
            async with httpx.AsyncClient(transport=self._transport,
                                         timeout=httpx.Timeout(REQUEST_TIMEOUT_SECONDS)) as client:
                request = client.request(method, url, headers=headers, **kwargs)
                response = await asyncio.wait_for(request, timeout=REQUEST_TIMEOUT_SECONDS)
        except PasteClientError:
            raise
        except Exception as e:
            error = classify_error(e)
            logger.warning(f"{method} {url} failed: {type(error).__name__}: {error.message}")
            raise error from e
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response
