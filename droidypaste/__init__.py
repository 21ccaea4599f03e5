"""droidypaste: client for self-hosted rustypaste servers."""

from .domain.app_constants import APP_VERSION as __version__  # noqa: F401
