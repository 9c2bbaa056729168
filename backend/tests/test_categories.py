"""
Tests for category endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_categories_is_public(client: AsyncClient, category):
    response = await client.get("/api/v1/categories/")
    assert response.status_code == 200
    data = response.json()
    assert [c["name"] for c in data] == ["Concerts"]
    assert data[0]["color"] == "#FF6B6B"


@pytest.mark.asyncio
async def test_list_categories_sorted_by_name(client: AsyncClient, auth_headers):
    for name in ("Workshops", "Art & Culture", "Sports"):
        response = await client.post(
            "/api/v1/categories/", json={"name": name}, headers=auth_headers
        )
        assert response.status_code == 201

    response = await client.get("/api/v1/categories/")
    assert [c["name"] for c in response.json()] == ["Art & Culture", "Sports", "Workshops"]


@pytest.mark.asyncio
async def test_create_category(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/categories/",
        json={"name": "Food & Drink", "description": "Tastings", "color": "#FF9FF3"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Food & Drink"

    detail = await client.get(f"/api/v1/categories/{data['id']}")
    assert detail.status_code == 200
    assert detail.json()["description"] == "Tastings"


@pytest.mark.asyncio
async def test_create_category_requires_name(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/categories/", json={"description": "nameless"}, headers=auth_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_category_unauthenticated(client: AsyncClient):
    response = await client.post("/api/v1/categories/", json={"name": "Sports"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_category_not_found(client: AsyncClient):
    response = await client.get("/api/v1/categories/99999")
    assert response.status_code == 404
