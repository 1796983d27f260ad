"""Centralized constants for auditstream."""


# ===== REMOTE API =====
class APIConstants:
    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_API_VERSION = "2022-11-28"
    ACCEPT_HEADER = "application/vnd.github+json"
    DEFAULT_TIMEOUT_SECONDS = 30.0
    USER_AGENT = "auditstream"


# ===== IDENTITY =====
class IdentityConstants:
    SEPARATOR = ":"
    SCOPE_FIELD = "enterprise"
    STREAM_ID_FIELD = "stream_id"
    MAX_STREAM_ID = 2**63 - 1


# ===== VENDOR CONFIG =====
class VendorConstants:
    AZURE_BLOB_TAG = "azure_blob"
    AZURE_BLOB_STREAM_TYPE = "Azure Blob Storage"


# ===== STATE =====
class StateConstants:
    DEFAULT_STATE_DIR = "./.auditstream/state"
    DEFAULT_S3_PREFIX = "auditstream-state/"
    STATE_FILE_SUFFIX = ".json"
    STATE_FORMAT_VERSION = 1
    SENSITIVE_PLACEHOLDER = "(sensitive value)"
