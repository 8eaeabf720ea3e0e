"""Servicios del cliente (uno por recurso REST).

Todos comparten el mismo `ClientContext` y la misma cadena de middlewares.
"""

from pocketkit.core.services.admin import AdminService
from pocketkit.core.services.auth import AuthService
from pocketkit.core.services.collection import CollectionService
from pocketkit.core.services.crud import CrudService
from pocketkit.core.services.health import HealthService
from pocketkit.core.services.record import RecordService
from pocketkit.core.services.settings import SettingsService

__all__ = [
    "AdminService",
    "AuthService",
    "CollectionService",
    "CrudService",
    "HealthService",
    "RecordService",
    "SettingsService",
]
