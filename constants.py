"""Shared constants for the bulletin-board node client."""

DEFAULT_API_HOST = "127.0.0.1"
API_PATH_PREFIX = "/api"
CLIENT_VERSION = "0.1.0"
ENV_PREFIX = "BBS_"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
ERROR_TIMEOUT = "timeout"
