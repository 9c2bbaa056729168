"""
Tests for health, metrics and request correlation.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_reports_cache_disabled(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/api/v1/categories/", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_request_id_generated_when_missing(client: AsyncClient):
    response = await client.get("/")
    assert len(response.headers["X-Request-ID"]) == 8


@pytest.mark.asyncio
async def test_metrics_count_booking_outcomes(client: AsyncClient, auth_headers, sold_out_event):
    await client.post("/api/v1/bookings/", json={"event_id": sold_out_event.id}, headers=auth_headers)

    response = await client.get("/metrics")
    assert response.status_code == 200
    body = response.text
    assert 'eventbook_booking_attempts_total{status="rejected"}' in body
    assert 'eventbook_admission_decisions_total{result="sold_out"}' in body
