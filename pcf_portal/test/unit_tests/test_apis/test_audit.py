"""
API tests for audit log endpoints following kkb_fastapi pattern.
"""

import pytest

from pcf_portal.test.factory.session import COMPANY_ID
from pcf_portal.test.factory.sharing import AuditLogItemFactory


@pytest.mark.asyncio
async def test_company_audit_log_is_paginated_newest_first(
    test_async_client, fake_backend, auth_headers
):
    entries = AuditLogItemFactory.build_batch(5)
    fake_backend.audit_logs[COMPANY_ID] = [e.model_dump(mode="json") for e in entries]

    response = await test_async_client.get(
        "/api/v1/audit", params={"page": 2, "page_size": 2}, headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 5
    assert data["page"] == 2
    assert [item["id"] for item in data["items"]] == [entries[2].id, entries[1].id]


@pytest.mark.asyncio
async def test_product_audit_log(test_async_client, fake_backend, auth_headers):
    entry = AuditLogItemFactory()
    fake_backend.product_audit_logs[(COMPANY_ID, 1)] = [entry.model_dump(mode="json")]

    response = await test_async_client.get("/api/v1/products/1/audit", headers=auth_headers)

    assert [item["id"] for item in response.json()["items"]] == [entry.id]


@pytest.mark.asyncio
async def test_audit_log_empty_on_backend_failure(test_async_client, fake_backend, auth_headers):
    fake_backend.fail("GET", f"/companies/{COMPANY_ID}/audit/", status_code=503)

    response = await test_async_client.get("/api/v1/audit", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["items"] == []
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_audit_log_rejects_bad_page(test_async_client, auth_headers):
    response = await test_async_client.get(
        "/api/v1/audit", params={"page": 0}, headers=auth_headers
    )
    assert response.status_code == 422
