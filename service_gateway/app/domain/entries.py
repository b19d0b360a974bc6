"""
Ledger entry resource handlers. Entries are not scoped to their member.
"""

from shared.logging import get_logger

from ..adapters.backend_client import BackendClient
from ..adapters.rpc import RpcError
from ..models import (
    CreateEntryRequest,
    Entry,
    ListEntriesByItemRequest,
    ListEntriesByUserRequest,
    ListEntriesResponse,
    PageRequest,
)
from .error_translator import Endpoint, ErrorTranslator


class EntryService:
    def __init__(self, backend: BackendClient, translator: ErrorTranslator):
        self.backend = backend
        self.translator = translator
        self.logger = get_logger("gateway.entries")

    async def create_entry(self, request: CreateEntryRequest) -> Entry:
        """Create an entry once both the member and the item are known to exist."""
        try:
            await self.backend.get_user(request.member_id)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ENTRY_CREATE_USER, exc) from exc

        try:
            await self.backend.get_item(request.item_id)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ENTRY_CREATE_ITEM, exc) from exc

        try:
            result = await self.backend.create_entry(
                request.member_id, request.item_id, request.quantity, request.total
            )
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ENTRY_CREATE, exc) from exc

        self.logger.info("Entry created", entry_id=result.entry.id)
        return Entry.from_rpc(result.entry)

    async def get_entry(self, entry_id: int) -> Entry:
        try:
            result = await self.backend.get_entry(entry_id)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ENTRY_GET, exc) from exc
        return Entry.from_rpc(result.entry)

    async def list_entries(self, page: PageRequest) -> ListEntriesResponse:
        try:
            result = await self.backend.list_entries(page.offset, page.limit)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ENTRY_LIST, exc) from exc
        return self._to_response(result.entries)

    async def list_entries_by_user(self, request: ListEntriesByUserRequest) -> ListEntriesResponse:
        try:
            result = await self.backend.list_entries_by_user(request.user_id, request.offset, request.limit)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ENTRY_LIST_BY_USER, exc) from exc
        return self._to_response(result.entries)

    async def list_entries_by_item(self, request: ListEntriesByItemRequest) -> ListEntriesResponse:
        try:
            result = await self.backend.list_entries_by_item(request.item_id, request.offset, request.limit)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.ENTRY_LIST_BY_ITEM, exc) from exc
        return self._to_response(result.entries)

    @staticmethod
    def _to_response(entries) -> ListEntriesResponse:
        return ListEntriesResponse(entries=[Entry.from_rpc(entry) for entry in entries])
