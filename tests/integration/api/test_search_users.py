import pytest
from httpx import AsyncClient

ACME = {"X-Tenant-ID": "acme-corp"}
GLOBEX = {"X-Tenant-ID": "globex"}


async def _create(client: AsyncClient, email, first_name, last_name, headers=ACME):
    response = await client.post(
        "/api/users",
        json={"email": email, "first_name": first_name, "last_name": last_name},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_search_users_best_match_first(client: AsyncClient):
    await _create(client, "mary@example.com", "Mary", "Janeway")
    await _create(client, "janet@example.com", "Janet", "Smith")
    await _create(client, "jane@example.com", "Jane", "Doe")
    await _create(client, "bob@example.com", "Bob", "Brown")

    response = await client.get("/api/users/search", params={"q": "jane"}, headers=ACME)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [u["identity"]["email"] for u in data["users"]] == [
        "jane@example.com",
        "janet@example.com",
        "mary@example.com",
    ]


@pytest.mark.asyncio
async def test_search_users_is_case_insensitive_and_matches_email(client: AsyncClient):
    await _create(client, "jane@example.com", "Jane", "Doe")

    response = await client.get(
        "/api/users/search", params={"q": "EXAMPLE"}, headers=ACME
    )

    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_search_users_any_term_matches(client: AsyncClient):
    await _create(client, "jane@example.com", "Jane", "Doe")
    await _create(client, "bob@example.com", "Bob", "Brown")

    response = await client.get(
        "/api/users/search", params={"q": "doe brown"}, headers=ACME
    )

    assert response.json()["total"] == 2


@pytest.mark.asyncio
async def test_search_users_treats_wildcards_literally(client: AsyncClient):
    await _create(client, "jane@example.com", "Jane", "Doe")

    response = await client.get("/api/users/search", params={"q": "j%"}, headers=ACME)

    assert response.status_code == 200
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_search_users_stays_in_tenant(client: AsyncClient):
    await _create(client, "jane@example.com", "Jane", "Doe", headers=GLOBEX)

    response = await client.get("/api/users/search", params={"q": "jane"}, headers=ACME)

    assert response.json()["total"] == 0
    assert response.json()["users"] == []


@pytest.mark.asyncio
async def test_search_users_query_too_short(client: AsyncClient):
    response = await client.get("/api/users/search", params={"q": "j"}, headers=ACME)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_search_users_query_missing(client: AsyncClient):
    response = await client.get("/api/users/search", headers=ACME)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_search_users_query_of_control_characters(client: AsyncClient):
    await _create(client, "jane@example.com", "Jane", "Doe")

    response = await client.get(
        "/api/users/search", params={"q": "\x01\x02"}, headers=ACME
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_INPUT"
