"""Integration-style tests that exercise the favorites and discover routes."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from whattoeat.db.connection import get_db
from whattoeat.main import app
from whattoeat.schemas.items import ItemType
from whattoeat.services.dependencies import VIEWER_HEADER, get_favorites_service
from whattoeat.services.favorites import FavoriteAggregator, FavoriteToggleCoordinator
from whattoeat.services.favorites_service import FavoritesService

from tests.whattoeat.support.in_memory_stores import (
    InMemoryEdgeStore,
    InMemoryItemStore,
    RecordingTransaction,
    StubItem,
)


def _as(user) -> dict[str, str]:
    return {VIEWER_HEADER: str(user.id)}


@pytest_asyncio.fixture
async def api_client(session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Create an ``AsyncClient`` whose requests share the test database session."""

    async def _override_get_db() -> AsyncIterator[AsyncSession]:
        yield session

    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def kitchen(session: AsyncSession, seed) -> dict:
    """Two users, each owning one meal and one restaurant."""

    alice = await seed.user("alice")
    bob = await seed.user("bob")
    data = {
        "alice": alice,
        "bob": bob,
        "alice_meal": await seed.meal(alice, "Alice's Risotto", is_favorite=True),
        "bob_meal": await seed.meal(bob, "Bob's Curry"),
        "bob_restaurant": await seed.restaurant(bob, "Bob's Diner"),
    }
    await session.commit()
    return data


@pytest.mark.asyncio
async def test_healthcheck(api_client: AsyncClient) -> None:
    response = await api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_toggle_bookmark_round_trip(api_client: AsyncClient, kitchen: dict) -> None:
    meal_id = kitchen["bob_meal"].id
    headers = _as(kitchen["alice"])

    created = await api_client.post(f"/favorites/meal/{meal_id}/toggle", headers=headers)
    state = await api_client.get(f"/favorites/meal/{meal_id}", headers=headers)
    owner_view = await api_client.get(f"/favorites/meal/{meal_id}", headers=_as(kitchen["bob"]))
    removed = await api_client.post(f"/favorites/meal/{meal_id}/toggle", headers=headers)

    assert created.status_code == 200
    assert created.json() == {"item_type": "meal", "item_id": meal_id, "resolved_favorite": True}
    assert state.json()["resolved_favorite"] is True
    assert owner_view.json()["resolved_favorite"] is False
    assert removed.json()["resolved_favorite"] is False


@pytest.mark.asyncio
async def test_owner_toggle_flips_own_flag(api_client: AsyncClient, kitchen: dict) -> None:
    meal_id = kitchen["alice_meal"].id

    response = await api_client.post(
        f"/favorites/meal/{meal_id}/toggle", headers=_as(kitchen["alice"])
    )

    assert response.status_code == 200
    assert response.json()["resolved_favorite"] is False


@pytest.mark.asyncio
async def test_toggle_without_identity_is_unauthorized(
    api_client: AsyncClient, kitchen: dict
) -> None:
    response = await api_client.post(f"/favorites/meal/{kitchen['bob_meal'].id}/toggle")

    assert response.status_code == 401
    payload = response.json()
    assert payload["error_type"] == "authentication_error"
    assert payload["path"] == f"/favorites/meal/{kitchen['bob_meal'].id}/toggle"


@pytest.mark.asyncio
async def test_toggle_unknown_item_is_not_found(api_client: AsyncClient, kitchen: dict) -> None:
    response = await api_client.post(
        "/favorites/restaurant/9999/toggle", headers=_as(kitchen["alice"])
    )

    assert response.status_code == 404
    payload = response.json()
    assert payload["error_type"] == "not_found"
    assert payload["message"] == "Restaurant not found"


@pytest.mark.asyncio
async def test_unknown_item_type_is_a_validation_error(
    api_client: AsyncClient, kitchen: dict
) -> None:
    response = await api_client.post("/favorites/dessert/1/toggle", headers=_as(kitchen["alice"]))

    assert response.status_code == 422
    assert response.json()["error_type"] == "validation_error"


@pytest.mark.asyncio
async def test_anonymous_state_read_is_false(api_client: AsyncClient, kitchen: dict) -> None:
    response = await api_client.get(f"/favorites/meal/{kitchen['alice_meal'].id}")

    assert response.status_code == 200
    assert response.json()["resolved_favorite"] is False


@pytest.mark.asyncio
async def test_list_favorites_returns_owned_and_bookmarked_items(
    api_client: AsyncClient, kitchen: dict
) -> None:
    headers = _as(kitchen["alice"])
    await api_client.post(f"/favorites/meal/{kitchen['bob_meal'].id}/toggle", headers=headers)
    await api_client.post(
        f"/favorites/restaurant/{kitchen['bob_restaurant'].id}/toggle", headers=headers
    )

    meals = await api_client.get("/favorites/meal", headers=headers)
    overview = await api_client.get("/favorites", headers=headers)

    assert meals.status_code == 200
    payload = meals.json()
    assert payload["total"] == 2
    assert [item["id"] for item in payload["items"]] == [
        kitchen["alice_meal"].id,
        kitchen["bob_meal"].id,
    ]
    assert all(item["resolved_favorite"] for item in payload["items"])
    assert "is_favorite" not in payload["items"][0]

    grouped = overview.json()
    assert len(grouped["meals"]) == 2
    assert [item["id"] for item in grouped["restaurants"]] == [kitchen["bob_restaurant"].id]


@pytest.mark.asyncio
async def test_list_favorites_requires_identity(api_client: AsyncClient, kitchen: dict) -> None:
    assert (await api_client.get("/favorites/meal")).status_code == 401
    assert (await api_client.get("/favorites")).status_code == 401


@pytest.mark.asyncio
async def test_discover_annotates_items_for_the_viewer(
    api_client: AsyncClient, kitchen: dict
) -> None:
    await api_client.post(
        f"/favorites/meal/{kitchen['bob_meal'].id}/toggle", headers=_as(kitchen["alice"])
    )

    viewer = await api_client.get("/discover/meal", headers=_as(kitchen["alice"]))
    anonymous = await api_client.get("/discover/meal")

    assert viewer.status_code == 200
    page = viewer.json()
    assert page["total"] == 2
    assert page["has_more"] is False
    resolved = {item["id"]: item["resolved_favorite"] for item in page["items"]}
    assert resolved == {kitchen["alice_meal"].id: True, kitchen["bob_meal"].id: True}
    assert all(not item["resolved_favorite"] for item in anonymous.json()["items"])


@pytest.mark.asyncio
async def test_discover_pagination_metadata(api_client: AsyncClient, kitchen: dict) -> None:
    response = await api_client.get("/discover/meal", params={"limit": 1, "offset": 0})

    page = response.json()
    assert page["limit"] == 1
    assert len(page["items"]) == 1
    assert page["items"][0]["id"] == kitchen["bob_meal"].id
    assert page["has_more"] is True


@pytest.mark.asyncio
async def test_toggle_storage_failure_is_an_internal_error(api_client: AsyncClient) -> None:
    items = InMemoryItemStore()
    items.add(ItemType.MEAL, StubItem(id=1, owner_id=1))
    edges = InMemoryEdgeStore()
    service = FavoritesService(
        items=items,
        coordinator=FavoriteToggleCoordinator(
            items=items,
            edges=edges,
            transaction=RecordingTransaction(fail=True),
        ),
        aggregator=FavoriteAggregator(items=items, edges=edges),
    )
    app.dependency_overrides[get_favorites_service] = lambda: service

    response = await api_client.post("/favorites/meal/1/toggle", headers={VIEWER_HEADER: "2"})

    assert response.status_code == 500
    payload = response.json()
    assert payload["error_type"] == "internal_error"
    assert payload["retry_after"] == 3
    assert response.headers["Retry-After"] == "3"


@pytest.mark.asyncio
async def test_inbound_request_id_is_echoed_in_errors(api_client: AsyncClient) -> None:
    response = await api_client.post(
        "/favorites/meal/1/toggle", headers={"X-Request-ID": "gateway-42"}
    )

    assert response.status_code == 401
    assert response.headers["X-Request-ID"] == "gateway-42"
    assert response.json()["request_id"] == "gateway-42"
