"""Integration tests: course endpoints."""

from decimal import Decimal

import pytest


@pytest.mark.asyncio
async def test_course_catalogue(async_client, api_base, ledger, auth_headers):
    headers = auth_headers("admin_sog")
    resp = await async_client.post(
        f"{api_base}/courses",
        headers=headers,
        json={"name": "Moto A2", "price": "350000", "total_hours": 20},
    )
    assert resp.status_code == 201, resp.text
    course = resp.json()["data"]
    assert course["branch_name"] == "Sogamoso"
    assert Decimal(course["price"]) == Decimal("350000")

    resp = await async_client.get(f"{api_base}/courses", headers=headers)
    assert [c["name"] for c in resp.json()["data"]] == ["Licencia B1", "Moto A2"]

    resp = await async_client.get(f"{api_base}/courses", headers=auth_headers("admin_dui"))
    assert [c["name"] for c in resp.json()["data"]] == ["Licencia B1"]

    resp = await async_client.put(
        f"{api_base}/courses/{course['id']}", headers=headers, json={"price": "380000.50"}
    )
    assert Decimal(resp.json()["data"]["price"]) == Decimal("380000.50")

    resp = await async_client.patch(f"{api_base}/courses/{course['id']}/toggle-status", headers=headers)
    assert resp.json()["data"]["active"] is False

    resp = await async_client.delete(f"{api_base}/courses/{course['id']}", headers=headers)
    assert resp.status_code == 200
    resp = await async_client.get(f"{api_base}/courses/{course['id']}", headers=headers)
    assert resp.json()["data"]["active"] is False


@pytest.mark.asyncio
async def test_shared_course_is_read_only_for_admins(async_client, api_base, ledger, auth_headers):
    course_id = ledger["course"].id
    resp = await async_client.get(f"{api_base}/courses/{course_id}", headers=auth_headers("admin_dui"))
    assert resp.status_code == 200
    assert resp.json()["data"]["branch_id"] is None

    resp = await async_client.put(
        f"{api_base}/courses/{course_id}", headers=auth_headers("admin_dui"), json={"total_hours": 45}
    )
    assert resp.status_code == 403

    resp = await async_client.put(
        f"{api_base}/courses/{course_id}", headers=auth_headers("super_admin"), json={"total_hours": 45}
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["total_hours"] == 45


@pytest.mark.asyncio
async def test_course_validation(async_client, api_base, ledger, auth_headers):
    headers = auth_headers("super_admin")
    resp = await async_client.post(
        f"{api_base}/courses", headers=headers, json={"name": "Moto A2", "price": "-1", "total_hours": 20}
    )
    assert resp.status_code == 422

    resp = await async_client.post(
        f"{api_base}/courses", headers=headers, json={"name": "LICENCIA B1", "total_hours": 40}
    )
    assert resp.status_code == 400
