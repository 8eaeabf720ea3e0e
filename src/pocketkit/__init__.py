"""pocketkit: cliente asíncrono y tipado para backends estilo PocketBase."""

from pocketkit.client import PocketBase
from pocketkit.core.config import ClientSettings
from pocketkit.core.context import ClientContext
from pocketkit.core.domain.configs import (
    AuthRefreshConfig,
    AuthWithPasswordConfig,
    CreateConfig,
    DeleteConfig,
    FileUpload,
    GetListConfig,
    GetOneConfig,
    SortField,
    UpdateConfig,
)
from pocketkit.core.domain.models import (
    Admin,
    AppleClientSecret,
    AuthResponse,
    Collection,
    Credential,
    CredentialKind,
    HealthCheck,
    ListResult,
    Record,
)
from pocketkit.core.errors import (
    ApiFailure,
    InvalidConfig,
    PocketKitError,
    SerializationFailure,
    TransportFailure,
    Unauthenticated,
)

__all__ = [
    "Admin",
    "AppleClientSecret",
    "ApiFailure",
    "AuthRefreshConfig",
    "AuthResponse",
    "AuthWithPasswordConfig",
    "ClientContext",
    "ClientSettings",
    "Collection",
    "CreateConfig",
    "Credential",
    "CredentialKind",
    "DeleteConfig",
    "FileUpload",
    "GetListConfig",
    "GetOneConfig",
    "HealthCheck",
    "InvalidConfig",
    "ListResult",
    "PocketBase",
    "PocketKitError",
    "Record",
    "SerializationFailure",
    "SortField",
    "TransportFailure",
    "Unauthenticated",
    "UpdateConfig",
]
