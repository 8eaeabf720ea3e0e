"""Servicio de metadatos de colecciones (`api/collections`, solo admins)."""

from __future__ import annotations

from typing import Sequence

from pocketkit.adapters.middleware import MiddlewareChain
from pocketkit.core.context import ClientContext
from pocketkit.core.domain.models import Collection
from pocketkit.core.domain.request import RequestDescriptor
from pocketkit.core.errors import InvalidConfig
from pocketkit.core.services.crud import CrudService

COLLECTIONS_PATH = "api/collections"


class CollectionService(CrudService[Collection]):
    def __init__(
        self,
        context: ClientContext,
        chain: MiddlewareChain,
        *,
        max_per_page: int | None = None,
    ) -> None:
        super().__init__(
            context,
            chain,
            base_path=COLLECTIONS_PATH,
            model=Collection,
            requires_auth=True,
            max_per_page=max_per_page,
        )

    async def import_collections(
        self,
        collections: Sequence[Collection],
        *,
        delete_missing: bool = False,
    ) -> None:
        """Importa (crea/actualiza) colecciones en bloque.

        `delete_missing=True` borra las colecciones del servidor que no estén en
        la lista, junto con sus registros.
        """

        if not collections:
            raise InvalidConfig("import_collections needs at least one collection")
        body = {
            "collections": [c.model_dump(mode="json", by_alias=True) for c in collections],
            "deleteMissing": delete_missing,
        }
        request = RequestDescriptor(
            method="PUT",
            path=f"{COLLECTIONS_PATH}/import",
            json=body,
            requires_auth=True,
        )
        await self._send(request)
