"""
Item resource handlers. Items are shared: any authenticated caller may act
on any item.
"""

from shared.logging import get_logger

from ..adapters.backend_client import BackendClient
from ..adapters.rpc import RpcError
from ..models import CreateItemRequest, Item, ListItemsResponse, PageRequest, UpdateItemRequest
from .error_translator import Endpoint, ErrorTranslator
from .partial_update import PartialUpdateCodec

ITEM_CODEC = PartialUpdateCodec(("name", "quantity", "price"))


class ItemService:
    def __init__(self, backend: BackendClient, translator: ErrorTranslator):
        self.backend = backend
        self.translator = translator
        self.logger = get_logger("gateway.items")

    async def create_item(self, request: CreateItemRequest) -> Item:
        try:
            result = await self.backend.create_item(request.name, request.quantity, request.price)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ITEM_CREATE, exc) from exc
        self.logger.info("Item created", item_id=result.item.id)
        return Item.from_rpc(result.item)

    async def get_item(self, item_id: int) -> Item:
        try:
            result = await self.backend.get_item(item_id)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ITEM_GET, exc) from exc
        return Item.from_rpc(result.item)

    async def list_items(self, page: PageRequest) -> ListItemsResponse:
        try:
            result = await self.backend.list_items(page.offset, page.limit)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ITEM_LIST, exc) from exc
        return ListItemsResponse(items=[Item.from_rpc(item) for item in result.items])

    async def update_item(self, request: UpdateItemRequest) -> Item:
        fields = ITEM_CODEC.from_request(request)
        try:
            result = await self.backend.update_item(request.id, ITEM_CODEC.encode(fields))
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ITEM_UPDATE, exc) from exc
        self.logger.info("Item updated", item_id=result.item.id)
        return Item.from_rpc(result.item)

    async def delete_item(self, item_id: int) -> None:
        try:
            await self.backend.delete_item(item_id)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ITEM_DELETE, exc) from exc
        self.logger.info("Item deleted", item_id=item_id)
