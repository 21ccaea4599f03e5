"""
Single Source of Truth for application metadata.
All app-wide constants MUST be defined here.
"""

APP_NAME = "droidypaste"
APP_VERSION = "0.2.0"

# Network
REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_SCHEME = "https://"
INSECURE_SCHEME = "http://"
LIST_PATH = "list"

# Multipart / form field names understood by the paste server
FIELD_FILE = "file"
FIELD_ONESHOT = "oneshot"
FIELD_URL = "url"
FIELD_ONESHOT_URL = "oneshot_url"
FIELD_REMOTE = "remote"

TEXT_UPLOAD_NAME = "text.txt"
TEXT_CONTENT_TYPE = "text/plain"
BINARY_CONTENT_TYPE = "application/octet-stream"
DEFAULT_FILE_NAME = "file"

# OS integration
SERVICE_NAME = "droidypaste"
APP_DIR_NAME = "droidypaste"
ENV_PREFIX = "DROIDYPASTE_"
