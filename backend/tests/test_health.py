"""
TrailMix Backend: Health and Connectivity Endpoint Tests
==========================================================
"""

import pytest

from trailmix import __version__


@pytest.mark.asyncio
async def test_welcome(test_client):
    response = await test_client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to Travel Trace API"}


@pytest.mark.asyncio
async def test_connectivity_probe(test_client):
    response = await test_client.get("/api/test")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Server is running and accessible"
    assert body["server"] == "TrailMix Backend"
    assert body["host"] == "test"
    assert body["timestamp"]


@pytest.mark.asyncio
async def test_health_reports_database(test_client):
    response = await test_client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["version"] == __version__


@pytest.mark.asyncio
async def test_request_id_header(test_client):
    response = await test_client.get("/", headers={"X-Request-ID": "abc12345"})
    assert response.headers["X-Request-ID"] == "abc12345"


@pytest.mark.asyncio
async def test_error_body_carries_request_id(test_client):
    response = await test_client.get("/api/trails/424242", headers={"X-Request-ID": "trace-1"})
    assert response.status_code == 404
    assert response.json()["request_id"] == "trace-1"
