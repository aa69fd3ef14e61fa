import os

from rokka_sdk.utils.environment import str2bool

ROKKA_API_URL = os.getenv("ROKKA_API_URL", "https://api.rokka.io")
ROKKA_API_VERSION = os.getenv("ROKKA_API_VERSION", "1")
ROKKA_IMAGE_HOST = os.getenv("ROKKA_IMAGE_HOST", "https://{{organization}}.rokka.io")
ROKKA_VERBOSE = str2bool(os.getenv("ROKKA_VERBOSE", "False"))

# Bounds of the retrying transport created when none is configured explicitly
ROKKA_RETRY_MAX_ATTEMPTS = int(os.getenv("ROKKA_RETRY_MAX_ATTEMPTS", "10"))
ROKKA_RETRY_TIME_BUDGET_MS = int(os.getenv("ROKKA_RETRY_TIME_BUDGET_MS", "6000"))
ROKKA_RETRY_BACKOFF_FACTOR = float(os.getenv("ROKKA_RETRY_BACKOFF_FACTOR", "0.1"))

IMAGE_HOST_ORGANIZATION_PLACEHOLDER = "{{organization}}"

API_VERSION_HEADER = "Api-Version"
API_KEY_HEADER = "Api-Key"
ACCEPT_HEADER = "Accept"
CONTENT_TYPE_HEADER = "Content-Type"
JSON_CONTENT_TYPE = "application/json"
