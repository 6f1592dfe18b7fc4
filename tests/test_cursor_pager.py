"""Tests for cursor/continuation-token pagination (no network)."""

from __future__ import annotations

import copy
from dataclasses import dataclass

import pytest

from pageable import ContractViolationError, Pager, cursor_pager

PETS = ["Fluffy", "Whiskers", "Spike", "Mittens", "Fido"]


@dataclass
class PetCursorRequest:
    cursor: str | None = None


@dataclass
class PetCursorResponse:
    pets: list[str] | None
    next_cursor: str | None


class FakeCursorService:
    """Hands out the next cursor as ``str(int(cursor) + 1)`` until *last*."""

    def __init__(self, last: int, pets: list[str] | None = None) -> None:
        self._last = last
        self._pets = pets if pets is not None else PETS
        self.calls: list[PetCursorRequest] = []

    async def get_pets(self, request: PetCursorRequest) -> PetCursorResponse:
        self.calls.append(copy.copy(request))
        if len(self.calls) > self._last + 1:
            raise AssertionError(f"unexpected request #{len(self.calls)}: {request}")
        nxt = "1" if request.cursor is None else str(int(request.cursor) + 1)
        if int(nxt) > self._last:
            nxt = None
        page = [f"{pet}@{request.cursor}" for pet in self._pets]
        return PetCursorResponse(pets=page, next_cursor=nxt)


class ScriptedService:
    def __init__(self, responses: list[PetCursorResponse]) -> None:
        self._responses = list(responses)
        self.calls: list[PetCursorRequest] = []

    async def get_pets(self, request: PetCursorRequest) -> PetCursorResponse:
        self.calls.append(copy.copy(request))
        return self._responses[len(self.calls) - 1]


def _pager(get_pets, request: PetCursorRequest | None = None) -> Pager:
    return cursor_pager(
        request if request is not None else PetCursorRequest(),
        get_pets,
        set_cursor=lambda r, cursor: setattr(r, "cursor", cursor),
        get_next_cursor=lambda resp: resp.next_cursor,
        get_items=lambda resp: resp.pets,
    )


class TestCursorTermination:
    @pytest.mark.anyio
    async def test_four_cursors_then_none_gives_five_pages(self):
        service = FakeCursorService(last=4)

        pages = [page async for page in _pager(service.get_pets).pages()]

        assert len(pages) == 5
        assert len(service.calls) == 5
        assert [call.cursor for call in service.calls] == [None, "1", "2", "3", "4"]
        assert pages[-1].response.next_cursor is None

    @pytest.mark.anyio
    async def test_items_flattened_in_request_order(self):
        service = FakeCursorService(last=4)

        items = await _pager(service.get_pets).collect()

        assert len(items) == 25
        assert items[:5] == [f"{pet}@None" for pet in PETS]
        assert items[-5:] == [f"{pet}@4" for pet in PETS]
        assert [item.split("@")[1] for item in items[::5]] == ["None", "1", "2", "3", "4"]

    @pytest.mark.parametrize("last", [0, 1, 7])
    @pytest.mark.anyio
    async def test_pages_match_cursor_count(self, last):
        service = FakeCursorService(last=last)

        pages = [page async for page in _pager(service.get_pets).pages()]

        assert len(pages) == last + 1
        assert len(service.calls) == last + 1

    @pytest.mark.anyio
    async def test_items_without_cursor_is_final_page(self):
        service = ScriptedService([PetCursorResponse(pets=["a", "b"], next_cursor=None)])

        pages = [page async for page in _pager(service.get_pets).pages()]

        assert [page.items for page in pages] == [("a", "b")]
        assert len(service.calls) == 1

    @pytest.mark.anyio
    async def test_neither_items_nor_cursor_emits_nothing(self):
        service = ScriptedService([PetCursorResponse(pets=None, next_cursor=None)])

        pages = [page async for page in _pager(service.get_pets).pages()]

        assert pages == []
        assert len(service.calls) == 1

    @pytest.mark.anyio
    async def test_empty_string_cursor_terminates(self):
        service = ScriptedService(
            [
                PetCursorResponse(pets=["a"], next_cursor="abc"),
                PetCursorResponse(pets=["b"], next_cursor=""),
            ]
        )

        items = await _pager(service.get_pets).collect()

        assert items == ["a", "b"]
        assert len(service.calls) == 2

    @pytest.mark.anyio
    async def test_absent_items_skip_page_but_follow_cursor(self):
        service = ScriptedService(
            [
                PetCursorResponse(pets=None, next_cursor="x"),
                PetCursorResponse(pets=[], next_cursor="y"),
                PetCursorResponse(pets=["c"], next_cursor=None),
            ]
        )

        pages = [page async for page in _pager(service.get_pets).pages()]

        assert [page.items for page in pages] == [(), ("c",)]
        assert [call.cursor for call in service.calls] == [None, "x", "y"]


class TestCursorRequestState:
    @pytest.mark.anyio
    async def test_terminal_step_does_not_write_request(self):
        service = FakeCursorService(last=2)
        request = PetCursorRequest()

        await _pager(service.get_pets, request).collect()

        assert request.cursor == "2"

    @pytest.mark.anyio
    async def test_starts_from_existing_cursor(self):
        service = FakeCursorService(last=3)

        await _pager(service.get_pets, PetCursorRequest(cursor="1")).collect()

        assert [call.cursor for call in service.calls] == ["1", "2", "3"]


class TestCursorErrors:
    @pytest.mark.anyio
    async def test_non_string_cursor_rejected(self):
        service = ScriptedService([PetCursorResponse(pets=["a"], next_cursor=2)])  # type: ignore[arg-type]

        with pytest.raises(ContractViolationError):
            await _pager(service.get_pets).collect()

    @pytest.mark.anyio
    async def test_request_error_propagates(self):
        class Unavailable(Exception):
            pass

        async def get_pets(request: PetCursorRequest) -> PetCursorResponse:
            raise Unavailable("503")

        with pytest.raises(Unavailable):
            await _pager(get_pets).collect()
