"""Константы клиента."""

from typing import Final

# ===== HTTP STATUS CODES =====
HTTP_OK: Final[int] = 200
HTTP_NO_CONTENT: Final[int] = 204
HTTP_UNAUTHORIZED: Final[int] = 401
HTTP_UNPROCESSABLE_ENTITY: Final[int] = 422

# Статус результата, когда HTTP ответ так и не был получен
STATUS_TRANSPORT_FAILURE: Final[int] = 0

# ===== HTTP HEADERS =====
HEADER_CONTENT_TYPE: Final[str] = "Content-Type"
HEADER_ACCEPT: Final[str] = "Accept"
HEADER_AUTHORIZATION: Final[str] = "Authorization"
HEADER_REQUESTED_WITH: Final[str] = "X-Requested-With"

CONTENT_TYPE_JSON: Final[str] = "application/json"
REQUESTED_WITH_AJAX: Final[str] = "XMLHttpRequest"
DEFAULT_MIME_TYPE: Final[str] = "application/octet-stream"

# ===== API ENDPOINTS =====
ENDPOINT_AUTH_REGISTER: Final[str] = "/auth/register"
ENDPOINT_AUTH_LOGIN: Final[str] = "/auth/login"
ENDPOINT_AUTH_ME: Final[str] = "/auth/me"
ENDPOINT_AUTH_LOGOUT: Final[str] = "/auth/logout"
ENDPOINT_UPLOAD: Final[str] = "/upload"
DOWNLOAD_PATH: Final[str] = "/download"

# ===== MULTIPART =====
UPLOAD_FIELD_NAME: Final[str] = "files[]"

# ===== TOKEN STORAGE =====
DEFAULT_TOKEN_KEY: Final[str] = "@dropnshare/auth_token"
DEFAULT_TOKEN_FILE: Final[str] = "~/.dropnshare/auth_token.json"

# ===== DEFAULTS =====
DEFAULT_API_URL: Final[str] = "https://arhamnatiq.dropnsharee.com/api"
DEFAULT_UPLOAD_MAX_RETRIES: Final[int] = 3

# ===== ERROR MESSAGES =====
MSG_INVALID_RESPONSE: Final[str] = "Invalid response"
MSG_NETWORK_ERROR: Final[str] = "Network error"
MSG_REQUEST_FAILED: Final[str] = "Request failed"
MSG_EMPTY_CREDENTIALS: Final[str] = "Email and password are required."
MSG_EMPTY_REGISTER_FIELDS: Final[str] = "Name, email and password are required."
MSG_PASSWORDS_MISMATCH: Final[str] = "Passwords do not match."
MSG_NO_FILES: Final[str] = "Add at least one file."
