"""
API tests for user energy emission endpoints following kkb_fastapi pattern.
"""

import pytest

from pcf_portal.test.factory.emission_record import UserEnergyEmissionFactory
from pcf_portal.test.factory.emission_reference import EmissionReferenceFactory
from pcf_portal.test.factory.session import COMPANY_ID

PRODUCT_ID = 1
USER_ENERGY_URL = f"/api/v1/products/{PRODUCT_ID}/emissions/user-energy"
BACKEND_PATH = f"/companies/{COMPANY_ID}/products/{PRODUCT_ID}/emissions/user_energy/"


@pytest.mark.asyncio
async def test_create_user_energy_emission(test_async_client, fake_backend, auth_headers):
    """50 kWh * (0.1 + 0.4) = 25.000"""
    reference = fake_backend.add_reference("user_energy", EmissionReferenceFactory())

    response = await test_async_client.post(
        USER_ENERGY_URL,
        json={"energy_consumption": "50", "reference": str(reference["id"]), "line_items": [3]},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["total_emissions"]["value"] == "25.000"
    [request] = fake_backend.requests_to("POST", BACKEND_PATH)
    assert request.body == {
        "energy_consumption": 50,
        "reference": reference["id"],
        "override_factors": [],
        "line_items": [3],
    }


@pytest.mark.asyncio
async def test_create_user_energy_emission_without_reference(
    test_async_client, fake_backend, auth_headers
):
    response = await test_async_client.post(
        USER_ENERGY_URL,
        json={"energy_consumption": "12", "reference": ""},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["total_emissions"]["display"] == "—"
    [request] = fake_backend.requests_to("POST", BACKEND_PATH)
    assert request.body["reference"] is None
    assert request.body["line_items"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("energy", ["0", "0.5", "abc"])
async def test_create_user_energy_emission_rejects_energy_below_one(
    test_async_client, fake_backend, auth_headers, energy
):
    response = await test_async_client.post(
        USER_ENERGY_URL,
        json={"energy_consumption": energy, "reference": "1"},
        headers=auth_headers,
    )

    assert response.status_code == 422
    assert response.json()["detail"] == (
        "Please enter a valid energy consumption value (must be 1 or greater)."
    )
    assert fake_backend.requests == []


@pytest.mark.asyncio
async def test_list_user_energy_emissions(test_async_client, fake_backend, auth_headers):
    fake_backend.add_emission("user_energy", COMPANY_ID, PRODUCT_ID, UserEnergyEmissionFactory())
    fake_backend.add_emission(
        "user_energy",
        COMPANY_ID,
        PRODUCT_ID,
        UserEnergyEmissionFactory(reference=None, reference_details=None),
    )

    response = await test_async_client.get(USER_ENERGY_URL, headers=auth_headers)

    assert response.status_code == 200
    totals = [record["total_emissions"] for record in response.json()]
    assert totals[0]["value"] == "25.000"
    assert totals[1]["display"] == "—"


@pytest.mark.asyncio
async def test_list_user_energy_emissions_fetches_missing_reference_details(
    test_async_client, fake_backend, auth_headers
):
    fake_backend.embed_reference_details = False
    reference = fake_backend.add_reference("user_energy", EmissionReferenceFactory())
    fake_backend.add_emission(
        "user_energy",
        COMPANY_ID,
        PRODUCT_ID,
        UserEnergyEmissionFactory(reference=reference["id"], reference_details=None),
    )

    response = await test_async_client.get(USER_ENERGY_URL, headers=auth_headers)

    [record] = response.json()
    assert record["total_emissions"]["value"] == "25.000"
    assert len(fake_backend.requests_to("GET", "/reference/user_energy/")) == 1


@pytest.mark.asyncio
async def test_validate_user_energy_form(test_async_client):
    response = await test_async_client.post(
        f"{USER_ENERGY_URL}/validate", json={"energy_consumption": "10", "reference": ""}
    )

    assert response.json() == {"incomplete": False, "errors": []}


@pytest.mark.asyncio
async def test_validate_user_energy_form_blank_energy(test_async_client):
    response = await test_async_client.post(
        f"{USER_ENERGY_URL}/validate", json={"energy_consumption": " "}
    )

    assert response.json()["incomplete"] is True


@pytest.mark.asyncio
async def test_update_user_energy_emission_patches(test_async_client, fake_backend, auth_headers):
    reference = fake_backend.add_reference("user_energy", EmissionReferenceFactory())
    record = fake_backend.add_emission(
        "user_energy",
        COMPANY_ID,
        PRODUCT_ID,
        UserEnergyEmissionFactory(reference=reference["id"], reference_details=None),
    )

    response = await test_async_client.put(
        f"{USER_ENERGY_URL}/{record['id']}",
        json={"energy_consumption": "20", "reference": str(reference["id"])},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["total_emissions"]["value"] == "10.000"
    assert len(fake_backend.requests_to("PATCH", f"{BACKEND_PATH}{record['id']}/")) == 1
    assert fake_backend.requests_to("PUT", f"{BACKEND_PATH}{record['id']}/") == []


@pytest.mark.asyncio
async def test_delete_user_energy_emission(test_async_client, fake_backend, auth_headers):
    record = fake_backend.add_emission(
        "user_energy", COMPANY_ID, PRODUCT_ID, UserEnergyEmissionFactory()
    )

    response = await test_async_client.delete(
        f"{USER_ENERGY_URL}/{record['id']}", headers=auth_headers
    )

    assert response.status_code == 204
    assert fake_backend.emissions["user_energy"][(COMPANY_ID, PRODUCT_ID)] == []
