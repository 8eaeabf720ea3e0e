"""Health check del servidor."""

from __future__ import annotations

from pydantic import TypeAdapter

from pocketkit.core.domain.models import HealthCheck
from pocketkit.core.domain.request import RequestDescriptor
from pocketkit.core.services.base import BaseService

_HEALTH_ADAPTER: TypeAdapter[HealthCheck] = TypeAdapter(HealthCheck)


class HealthService(BaseService):
    async def check(self) -> HealthCheck:
        response = await self._send(RequestDescriptor(method="GET", path="api/health"))
        return self._decode(response, _HEALTH_ADAPTER)
