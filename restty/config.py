"""
Configuration for restty.

All values are plain defaults; a Settings instance is built once at startup
and passed to every component that needs it.
"""

from pydantic import BaseModel, ConfigDict

# Hosted persistence/auth API
REMOTE_URL = "https://restty.supabase.co"
REMOTE_API_KEY = "restty-publishable-key"

APP_NAME = "restty"

# Default timeout in seconds
DEFAULT_TIMEOUT = 30.0

# Ordered history cap and upload budgets (bytes)
HISTORY_LIMIT = 100
MAX_BODY_BYTES = 10_000
MAX_RESPONSE_BYTES = 100_000


class Settings(BaseModel):
    """Runtime settings shared by the executor, stores and services."""
    remote_url: str = REMOTE_URL
    api_key: str = REMOTE_API_KEY
    app_name: str = APP_NAME
    request_timeout: float = DEFAULT_TIMEOUT
    follow_redirects: bool = True
    history_limit: int = HISTORY_LIMIT
    max_body_bytes: int = MAX_BODY_BYTES
    max_response_bytes: int = MAX_RESPONSE_BYTES

    model_config = ConfigDict(frozen=True)
