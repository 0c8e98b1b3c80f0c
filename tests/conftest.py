"""Shared fixtures: settings isolated from the user's environment and an in-memory contacts gateway."""

from __future__ import annotations

import asyncio

import pytest

from core.config import AppSettings
from core.domain.models import Contact
from core.errors import ApiError


def make_contact(contact_id: int, email: str | None = None) -> Contact:
    email = email or f"user{contact_id}@example.org"
    return Contact(
        id=contact_id,
        email=email,
        reverse_alias=f'"{email}" <ra+{contact_id}@sl.test>',
        reverse_alias_address=f"ra+{contact_id}@sl.test",
    )


def make_page(first_id: int, size: int) -> list[Contact]:
    return [make_contact(first_id + offset) for offset in range(size)]


class FakeGateway:
    """In-memory `ContactsGateway`.

    `pages` maps a page index to the contacts it returns, or to an `ApiError`
    it raises. Missing pages are empty. Setting `gate` holds every fetch open
    until the event is set.
    """

    def __init__(self, pages: dict[int, list[Contact] | ApiError] | None = None) -> None:
        self.pages: dict[int, list[Contact] | ApiError] = pages or {}
        self.fetch_calls: list[tuple[int, int]] = []
        self.delete_calls: list[int] = []
        self.delete_error: ApiError | None = None
        self.gate: asyncio.Event | None = None

    async def fetch_contacts(self, alias_id: int, page: int) -> list[Contact]:
        self.fetch_calls.append((alias_id, page))
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.pages.get(page, [])
        if isinstance(outcome, ApiError):
            raise outcome
        return list(outcome)

    async def delete_contact(self, contact_id: int) -> None:
        self.delete_calls.append(contact_id)
        if self.delete_error is not None:
            raise self.delete_error


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_base_url="https://sl.test",
        api_key="test-api-key",
        http_timeout_seconds=5.0,
    )


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()
