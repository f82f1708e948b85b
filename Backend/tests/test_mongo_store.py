"""
MongoProjectStore against an in-process MongoDB (mongomock-motor), so the
Beanie queries run without a server.
"""
import pytest
import pytest_asyncio
from beanie import init_beanie
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from hackforge import db
from hackforge.core.exceptions import ProjectNotFoundError
from hackforge.models import ProjectMetadata
from hackforge.models.project import Project
from hackforge.services.project_store import MongoProjectStore


@pytest_asyncio.fixture
async def mongo_store():
    client = AsyncMongoMockClient()
    await init_beanie(database=client["hackforge_test"], document_models=[Project])
    return MongoProjectStore()


async def _add(store, title, user_id="alice", **kwargs):
    return await store.create(
        user_id=user_id,
        title=title,
        prompt=kwargs.pop("prompt", f"prompt for {title}"),
        generated_code="code",
        **kwargs,
    )


@pytest.mark.asyncio
async def test_create_trims_and_persists(mongo_store):
    project = await _add(
        mongo_store, "  Todo app  ", tags=[" react ", "ui"], framework="react",
        metadata=ProjectMetadata(model="gemini-1.5-flash"),
    )

    assert ObjectId.is_valid(project.id)
    assert project.title == "Todo app"
    assert project.tags == ["react", "ui"]

    stored = await mongo_store.get(project.id, "alice")
    assert stored.title == "Todo app"
    assert stored.framework == "react"
    assert stored.metadata.model == "gemini-1.5-flash"
    assert stored.is_favorite is False


@pytest.mark.asyncio
async def test_list_search_is_literal_and_case_insensitive(mongo_store):
    await _add(mongo_store, "Weather Dashboard")
    await _add(mongo_store, "Chat", prompt="a c++ chat server")
    await _add(mongo_store, "Calculator")

    items, total = await mongo_store.list("alice", search="weather")
    assert total == 1
    assert items[0].title == "Weather Dashboard"

    items, total = await mongo_store.list("alice", search="C++")
    assert [p.title for p in items] == ["Chat"]

    items, total = await mongo_store.list("alice", search=".*")
    assert total == 0


@pytest.mark.asyncio
async def test_list_sorts_and_paginates(mongo_store):
    for title in ("delta", "alpha", "charlie", "bravo", "echo"):
        await _add(mongo_store, title)

    first, total = await mongo_store.list("alice", page=1, limit=2, sort_by="title", ascending=True)
    last, _ = await mongo_store.list("alice", page=3, limit=2, sort_by="title", ascending=True)
    desc, _ = await mongo_store.list("alice", limit=10, sort_by="title")

    assert total == 5
    assert [p.title for p in first] == ["alpha", "bravo"]
    assert [p.title for p in last] == ["echo"]
    assert [p.title for p in desc] == ["echo", "delta", "charlie", "bravo", "alpha"]


@pytest.mark.asyncio
async def test_update_trims_and_ignores_unknown_fields(mongo_store):
    project = await _add(mongo_store, "Original")

    updated = await mongo_store.update(
        project.id, "alice", {"title": "  Renamed  ", "tags": [" a ", "b "], "user_id": "mallory"},
    )

    assert updated.title == "Renamed"
    assert updated.tags == ["a", "b"]
    assert updated.user_id == "alice"

    stored = await mongo_store.get(project.id, "alice")
    assert stored.title == "Renamed"
    assert stored.tags == ["a", "b"]


@pytest.mark.asyncio
async def test_operations_are_scoped_to_user(mongo_store):
    project = await _add(mongo_store, "Private")
    await _add(mongo_store, "Bob's", user_id="bob")

    for call in (
        mongo_store.get(project.id, "bob"),
        mongo_store.update(project.id, "bob", {"title": "x"}),
        mongo_store.delete(project.id, "bob"),
        mongo_store.toggle_favorite(project.id, "bob"),
    ):
        with pytest.raises(ProjectNotFoundError):
            await call

    items, total = await mongo_store.list("alice")
    assert total == 1
    assert items[0].title == "Private"


@pytest.mark.asyncio
@pytest.mark.parametrize("project_id", ["not-an-id", "123", str(ObjectId())])
async def test_invalid_or_unknown_id_is_not_found(mongo_store, project_id):
    with pytest.raises(ProjectNotFoundError):
        await mongo_store.get(project_id, "alice")


@pytest.mark.asyncio
async def test_toggle_favorite_and_delete(mongo_store):
    project = await _add(mongo_store, "Star me")

    on = await mongo_store.toggle_favorite(project.id, "alice")
    off = await mongo_store.toggle_favorite(project.id, "alice")
    assert on.is_favorite is True
    assert off.is_favorite is False

    await mongo_store.delete(project.id, "alice")
    with pytest.raises(ProjectNotFoundError):
        await mongo_store.get(project.id, "alice")


@pytest.mark.asyncio
async def test_project_routes_on_mongo_store(async_client, mongo_store):
    db.set_store(mongo_store)

    created = await async_client.post(
        "/api/projects",
        json={"title": " Mongo ", "prompt": "a prompt", "generatedCode": "code", "userId": "alice"},
    )
    assert created.status_code == 201
    project_id = created.json()["project"]["_id"]

    listed = (await async_client.get("/api/projects", params={"userId": "alice"})).json()
    assert listed["pagination"]["total"] == 1
    assert listed["projects"][0]["title"] == "Mongo"

    missing = await async_client.get("/api/projects/not-an-id", params={"userId": "alice"})
    assert missing.status_code == 404
    assert missing.json()["error"] == "PROJECT_NOT_FOUND"

    toggled = await async_client.patch(f"/api/projects/{project_id}/favorite", json={"userId": "alice"})
    assert toggled.json()["project"]["isFavorite"] is True
