"""Tests for ContactListSynchronizer: paging, refresh, delete and the in-flight guard."""

import asyncio

import pytest
from conftest import FakeGateway, make_contact, make_page

from core.errors import InternalServerError, InvalidApiKeyError
from core.services.contact_sync import ContactListSynchronizer, SyncKind

ALIAS_ID = 7


@pytest.mark.asyncio
async def test_initial_state():
    sync = ContactListSynchronizer(FakeGateway(), ALIAS_ID)
    assert sync.items == ()
    assert sync.last_fetched_page is None
    assert sync.more_available is True
    assert sync.is_fetching is False
    assert sync.is_empty is True


@pytest.mark.asyncio
async def test_load_next_appends_pages_in_order():
    pages = {0: make_page(1, 3), 1: make_page(4, 2), 2: make_page(6, 4)}
    gateway = FakeGateway(pages)
    sync = ContactListSynchronizer(gateway, ALIAS_ID)

    for expected_page in range(3):
        result = await sync.load_next()
        assert result.kind is SyncKind.APPENDED
        assert result.page == expected_page

    assert [c.id for c in sync.items] == list(range(1, 10))
    assert sync.last_fetched_page == 2
    assert gateway.fetch_calls == [(ALIAS_ID, 0), (ALIAS_ID, 1), (ALIAS_ID, 2)]


@pytest.mark.asyncio
async def test_twenty_twenty_then_empty_scenario():
    gateway = FakeGateway({0: make_page(1, 20), 1: make_page(21, 20)})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)

    await sync.load_next()
    second = await sync.load_next()
    assert second.kind is SyncKind.APPENDED
    assert len(sync.items) == 40
    assert sync.last_fetched_page == 1

    third = await sync.load_next()
    assert third.kind is SyncKind.EXHAUSTED
    assert third.page == 2
    assert sync.more_available is False
    assert len(sync.items) == 40
    assert sync.last_fetched_page == 1


@pytest.mark.asyncio
async def test_load_next_after_exhaustion_makes_no_call():
    gateway = FakeGateway({0: make_page(1, 2)})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)
    await sync.load_next()
    await sync.load_next()
    calls = len(gateway.fetch_calls)

    result = await sync.load_next()

    assert result.kind is SyncKind.SKIPPED
    assert len(gateway.fetch_calls) == calls


@pytest.mark.asyncio
async def test_overlapping_load_next_issues_one_call():
    gateway = FakeGateway({0: make_page(1, 5)})
    gateway.gate = asyncio.Event()
    sync = ContactListSynchronizer(gateway, ALIAS_ID)

    first = asyncio.create_task(sync.load_next())
    await asyncio.sleep(0)
    assert sync.is_fetching is True

    second = await sync.load_next()
    assert second.kind is SyncKind.SKIPPED

    gateway.gate.set()
    result = await first

    assert result.kind is SyncKind.APPENDED
    assert len(gateway.fetch_calls) == 1
    assert sync.is_fetching is False
    assert len(sync.items) == 5


@pytest.mark.asyncio
async def test_refresh_while_loading_is_dropped():
    gateway = FakeGateway({0: make_page(1, 2)})
    gateway.gate = asyncio.Event()
    sync = ContactListSynchronizer(gateway, ALIAS_ID)

    pending = asyncio.create_task(sync.load_next())
    await asyncio.sleep(0)

    dropped = await sync.refresh()
    assert dropped.kind is SyncKind.SKIPPED

    gateway.gate.set()
    await pending
    assert gateway.fetch_calls == [(ALIAS_ID, 0)]


@pytest.mark.asyncio
async def test_failed_load_next_keeps_state_and_allows_retry():
    gateway = FakeGateway({0: make_page(1, 3), 1: InternalServerError()})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)
    await sync.load_next()
    before = sync.items

    with pytest.raises(InternalServerError):
        await sync.load_next()

    assert sync.items == before
    assert sync.last_fetched_page == 0
    assert sync.more_available is True
    assert sync.is_fetching is False

    gateway.pages[1] = make_page(4, 1)
    retried = await sync.load_next()
    assert retried.kind is SyncKind.APPENDED
    assert retried.page == 1
    assert [c.id for c in sync.items] == [1, 2, 3, 4]


@pytest.mark.asyncio
async def test_unauthorized_list_call_leaves_collection_unchanged():
    gateway = FakeGateway({0: InvalidApiKeyError()})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)

    with pytest.raises(InvalidApiKeyError):
        await sync.load_next()

    assert sync.items == ()
    assert sync.last_fetched_page is None


@pytest.mark.asyncio
async def test_refresh_replaces_collection_and_resets_cursor():
    gateway = FakeGateway({0: make_page(1, 2), 1: make_page(3, 2)})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)
    await sync.load_next()
    await sync.load_next()

    gateway.pages[0] = [make_contact(100), make_contact(101)]
    result = await sync.refresh()

    assert result.kind is SyncKind.REPLACED
    assert result.page == 0
    assert [c.id for c in sync.items] == [100, 101]
    assert sync.last_fetched_page == 0
    assert gateway.fetch_calls[-1] == (ALIAS_ID, 0)


@pytest.mark.asyncio
async def test_refresh_reopens_exhausted_list():
    gateway = FakeGateway({0: make_page(1, 2)})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)
    await sync.load_next()
    await sync.load_next()
    assert sync.more_available is False

    gateway.pages[1] = make_page(3, 1)
    await sync.refresh()
    assert sync.more_available is True

    result = await sync.load_next()
    assert result.kind is SyncKind.APPENDED
    assert [c.id for c in sync.items] == [1, 2, 3]


@pytest.mark.asyncio
async def test_refresh_with_empty_result_clears_collection():
    gateway = FakeGateway({0: make_page(1, 3)})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)
    await sync.load_next()

    gateway.pages[0] = []
    result = await sync.refresh()

    assert result.kind is SyncKind.EXHAUSTED
    assert sync.items == ()
    assert sync.is_empty is True
    assert sync.more_available is False
    assert sync.last_fetched_page is None


@pytest.mark.asyncio
async def test_refresh_failure_leaves_everything_untouched():
    gateway = FakeGateway({0: make_page(1, 2)})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)
    await sync.load_next()
    await sync.load_next()
    snapshot = (sync.items, sync.last_fetched_page, sync.more_available)

    gateway.pages[0] = InvalidApiKeyError()
    with pytest.raises(InvalidApiKeyError):
        await sync.refresh()

    assert (sync.items, sync.last_fetched_page, sync.more_available) == snapshot
    assert sync.is_fetching is False


@pytest.mark.asyncio
async def test_cancelled_fetch_clears_in_flight_flag():
    gateway = FakeGateway({0: make_page(1, 2)})
    gateway.gate = asyncio.Event()
    sync = ContactListSynchronizer(gateway, ALIAS_ID)

    task = asyncio.create_task(sync.load_next())
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert sync.is_fetching is False
    assert sync.items == ()
    assert sync.last_fetched_page is None


@pytest.mark.asyncio
async def test_load_all_stops_when_exhausted():
    gateway = FakeGateway({0: make_page(1, 2), 1: make_page(3, 2)})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)

    results = await sync.load_all()

    assert [r.kind for r in results] == [SyncKind.APPENDED, SyncKind.APPENDED, SyncKind.EXHAUSTED]
    assert len(sync.items) == 4


@pytest.mark.asyncio
async def test_load_all_respects_max_pages():
    gateway = FakeGateway({page: make_page(page * 10, 10) for page in range(5)})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)

    await sync.load_all(max_pages=2)

    assert len(gateway.fetch_calls) == 2
    assert sync.last_fetched_page == 1
    assert sync.more_available is True


@pytest.mark.asyncio
async def test_delete_item_removes_exactly_one_match():
    gateway = FakeGateway({0: make_page(1, 3)})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)
    await sync.load_next()

    removed = await sync.delete_item(2)

    assert removed is not None and removed.id == 2
    assert [c.id for c in sync.items] == [1, 3]
    assert gateway.delete_calls == [2]


@pytest.mark.asyncio
async def test_delete_item_absent_locally_is_noop():
    gateway = FakeGateway({0: make_page(1, 2)})
    sync = ContactListSynchronizer(gateway, ALIAS_ID)
    await sync.load_next()

    removed = await sync.delete_item(99)

    assert removed is None
    assert gateway.delete_calls == [99]
    assert [c.id for c in sync.items] == [1, 2]


@pytest.mark.asyncio
async def test_delete_item_failure_keeps_collection():
    gateway = FakeGateway({0: make_page(1, 2)})
    gateway.delete_error = InternalServerError()
    sync = ContactListSynchronizer(gateway, ALIAS_ID)
    await sync.load_next()

    with pytest.raises(InternalServerError):
        await sync.delete_item(1)

    assert [c.id for c in sync.items] == [1, 2]


@pytest.mark.asyncio
async def test_rebind_keeps_items_and_cursor():
    first = FakeGateway({0: make_page(1, 2)})
    sync = ContactListSynchronizer(first, ALIAS_ID)
    await sync.load_next()

    second = FakeGateway({1: make_page(3, 1)})
    sync.rebind(second)
    await sync.delete_item(1)
    await sync.load_next()

    assert first.delete_calls == []
    assert second.delete_calls == [1]
    assert second.fetch_calls == [(ALIAS_ID, 1)]
    assert [c.id for c in sync.items] == [2, 3]
