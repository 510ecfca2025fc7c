from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi import Depends, FastAPI, Request
from httpx import ASGITransport, AsyncClient

from sorting.api.deps import sort_descriptor
from sorting.api.errors import install
from sorting.api.links import remove_sort_link, sort_links
from sorting.applier import apply_ordering
from sorting.core.config import settings
from sorting.descriptor import SortDescriptor
from sorting.query import Query
from tests.factories.things import Thing, make_things


def create_app() -> FastAPI:
    app = FastAPI()
    install(app)
    rows = make_things(12)

    @app.get("/things")
    def list_things(
        request: Request,
        sort: SortDescriptor[Thing] = Depends(sort_descriptor(Thing)),
    ):
        return {
            "sort": str(sort),
            "ids": [t.id for t in sort.apply(Query(rows))],
            "links": sort_links(request, sort),
            "remove_name": remove_sort_link(request, sort, "name"),
        }

    @app.get("/strict")
    def strict(request: Request):
        raw = request.query_params.get("sort")
        return {"sort": str(SortDescriptor(Thing, raw, duplicate_policy="error"))}

    @app.get("/broken")
    def broken():
        apply_ordering(None, [])

    return app


def _sort_param(url: str) -> list[str] | None:
    return parse_qs(urlsplit(url).query).get("sort")


@pytest.mark.asyncio
async def test_descriptor_is_read_from_the_query_string():
    async with AsyncClient(transport=ASGITransport(app=create_app()), base_url="http://test") as ac:
        r = await ac.get("/things", params={"sort": "-NAME,id,bogus"})

    assert r.status_code == 200
    body = r.json()
    assert body["sort"] == "-name,id"
    assert body["ids"] == [3, 7, 11, 2, 6, 10, 1, 5, 9, 4, 8, 12]


@pytest.mark.asyncio
async def test_missing_parameter_keeps_source_order():
    async with AsyncClient(transport=ASGITransport(app=create_app()), base_url="http://test") as ac:
        r = await ac.get("/things")

    body = r.json()
    assert body["sort"] == ""
    assert body["ids"] == list(range(1, 13))
    assert _sort_param(body["links"]["id"]) == ["id"]
    assert _sort_param(body["remove_name"]) is None


@pytest.mark.asyncio
async def test_repeated_parameters_are_joined():
    async with AsyncClient(transport=ASGITransport(app=create_app()), base_url="http://test") as ac:
        r = await ac.get("/things?sort=-name&sort=id")

    assert r.json()["sort"] == "-name,id"


@pytest.mark.asyncio
async def test_links_carry_the_next_descriptor():
    async with AsyncClient(transport=ASGITransport(app=create_app()), base_url="http://test") as ac:
        r = await ac.get("/things?page=2&sort=-id")

    body = r.json()
    links = body["links"]
    assert set(links) == {"id", "name", "created_at"}
    assert _sort_param(links["id"]) == ["id"]
    assert _sort_param(links["name"]) == ["-id,name"]
    assert parse_qs(urlsplit(links["name"]).query)["page"] == ["2"]
    assert urlsplit(links["created_at"]).path == "/things"
    assert _sort_param(body["remove_name"]) == ["-id"]


@pytest.mark.asyncio
async def test_parameter_name_comes_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "sort_param", "order")

    async with AsyncClient(transport=ASGITransport(app=create_app()), base_url="http://test") as ac:
        r = await ac.get("/things?order=-id&sort=name")

    body = r.json()
    assert body["sort"] == "-id"
    assert parse_qs(urlsplit(body["links"]["id"]).query)["order"] == ["id"]


@pytest.mark.asyncio
async def test_duplicate_fields_map_to_bad_request():
    async with AsyncClient(transport=ASGITransport(app=create_app()), base_url="http://test") as ac:
        r = await ac.get("/strict", params={"sort": "id,-id"})

    assert r.status_code == 400
    assert r.json() == {"detail": "duplicate sort field: id"}


@pytest.mark.asyncio
async def test_precondition_errors_map_to_server_error():
    async with AsyncClient(transport=ASGITransport(app=create_app()), base_url="http://test") as ac:
        r = await ac.get("/broken")

    assert r.status_code == 500
    assert "query handle" in r.json()["detail"]
