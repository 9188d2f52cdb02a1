# Services package

from .http_executor import RequestExecutor, format_body, format_elapsed
from .credential_store import CredentialStore
from .remote_store import RemoteHistoryStore
from .auth_service import AuthClient, classify_auth_error
from .history_service import HistoryService, truncate

__all__ = [
    "RequestExecutor",
    "format_body",
    "format_elapsed",
    "CredentialStore",
    "RemoteHistoryStore",
    "AuthClient",
    "classify_auth_error",
    "HistoryService",
    "truncate",
]
