"""
Constants for API Client Module
================================

Default connection settings and the server endpoint paths used by the
request models.
"""

# Default configuration
DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_TIMEOUT = 600.0

# Endpoint paths
CREATE_MODEL_PATH = "/api/create"
PUSH_MODEL_PATH = "/api/push"
GENERATE_PATH = "/api/generate"
BLOBS_PATH = "/api/blobs"

# Content types
JSON_CONTENT_TYPE = "application/json"
OCTET_STREAM_CONTENT_TYPE = "application/octet-stream"
EVENT_STREAM_CONTENT_TYPE = "text/event-stream"

# Streaming frame markers
DONE_SENTINEL = "[DONE]"
DONE_EVENT = "done"
ERROR_EVENT = "error"
