"""Paginated synchronisation of an alias' contacts.

The synchronizer owns the local, ordered list of contacts for one alias and
the pagination cursor that goes with it. UI layers (the CLI today) only call
`load_next()`, `refresh()` and `delete_item()` and render whatever the
synchronizer exposes afterwards.

Concurrency model: a single asyncio event loop. `_is_fetching` is set before
the first `await`, so a second call issued while a fetch is pending sees the
flag and is dropped instead of queued. That flag is the only guard; no locks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from core.domain.models import Contact
from core.interfaces.contacts import ContactsGateway

logger = logging.getLogger(__name__)


class SyncKind(str, Enum):
    """What a synchronizer call did to the local collection."""

    APPENDED = "appended"
    REPLACED = "replaced"
    EXHAUSTED = "exhausted"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one `load_next()` / `refresh()` call."""

    kind: SyncKind
    page: int | None = None
    items: tuple[Contact, ...] = ()


_SKIPPED = SyncResult(kind=SyncKind.SKIPPED)


class ContactListSynchronizer:
    """Keeps the contacts of `alias_id` in sync with the server, page by page.

    State is only mutated on the success path of a fetch or delete; any
    `ApiError` raised by the gateway propagates with the collection and the
    cursor exactly as they were before the call.
    """

    def __init__(self, gateway: ContactsGateway, alias_id: int) -> None:
        self._gateway = gateway
        self._alias_id = alias_id
        self._items: list[Contact] = []
        self._last_fetched_page: int | None = None
        self._more_available = True
        self._is_fetching = False

    def rebind(self, gateway: ContactsGateway) -> None:
        """Usa otro gateway (p. ej. un cliente HTTP nuevo) conservando la lista y el cursor."""

        if self._is_fetching:
            raise RuntimeError("cannot rebind while a fetch is in flight")
        self._gateway = gateway

    @property
    def alias_id(self) -> int:
        return self._alias_id

    @property
    def items(self) -> tuple[Contact, ...]:
        return tuple(self._items)

    @property
    def last_fetched_page(self) -> int | None:
        return self._last_fetched_page

    @property
    def more_available(self) -> bool:
        return self._more_available

    @property
    def is_fetching(self) -> bool:
        return self._is_fetching

    @property
    def is_empty(self) -> bool:
        return not self._items

    async def load_next(self) -> SyncResult:
        """Fetch the page after the last one fetched and append it.

        Dropped (no network call) when the list is exhausted or another
        fetch is pending.
        """

        if not self._more_available or self._is_fetching:
            logger.debug(
                "load_next dropped (alias=%s more=%s fetching=%s)",
                self._alias_id,
                self._more_available,
                self._is_fetching,
            )
            return _SKIPPED

        page = 0 if self._last_fetched_page is None else self._last_fetched_page + 1
        return await self._fetch(page, replace=False)

    async def refresh(self) -> SyncResult:
        """Fetch page 0 again and replace the whole collection with it.

        A refresh ignores a previous "no more pages" state but shares the
        in-flight guard with `load_next()`: while a fetch is pending it is
        dropped.
        """

        if self._is_fetching:
            logger.debug("refresh dropped (alias=%s): fetch in flight", self._alias_id)
            return _SKIPPED
        return await self._fetch(0, replace=True)

    async def load_all(self, max_pages: int | None = None) -> list[SyncResult]:
        """Call `load_next()` until the list is exhausted or `max_pages` pages arrived."""

        results: list[SyncResult] = []
        loaded = 0
        while max_pages is None or loaded < max_pages:
            result = await self.load_next()
            results.append(result)
            if result.kind is not SyncKind.APPENDED:
                break
            loaded += 1
        return results

    async def delete_item(self, contact_id: int) -> Contact | None:
        """Delete a contact remotely, then drop it from the local collection.

        Returns the removed contact, or `None` when the server accepted the
        delete but the id was not in the local collection.
        """

        await self._gateway.delete_contact(contact_id)

        for index, contact in enumerate(self._items):
            if contact.id == contact_id:
                return self._items.pop(index)

        logger.warning(
            "Deleted contact %s is not in the local list of alias %s",
            contact_id,
            self._alias_id,
        )
        return None

    async def _fetch(self, page: int, *, replace: bool) -> SyncResult:
        self._is_fetching = True
        logger.debug("Fetching contacts alias=%s page=%s", self._alias_id, page)
        try:
            contacts = await self._gateway.fetch_contacts(self._alias_id, page)
        finally:
            self._is_fetching = False

        if not contacts:
            self._more_available = False
            if replace:
                self._items = []
                self._last_fetched_page = None
            return SyncResult(kind=SyncKind.EXHAUSTED, page=page)

        if replace:
            self._items = list(contacts)
            self._more_available = True
        else:
            self._items.extend(contacts)
        self._last_fetched_page = page

        logger.debug(
            "Fetched %d contacts alias=%s page=%s total=%d",
            len(contacts),
            self._alias_id,
            page,
            len(self._items),
        )
        return SyncResult(
            kind=SyncKind.REPLACED if replace else SyncKind.APPENDED,
            page=page,
            items=tuple(contacts),
        )
