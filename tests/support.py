"""
tests.support

Request helpers shared by the API and web tests.
"""

from __future__ import annotations

from typing import Any

import httpx

BASE_URL = "http://testserver"
PASSWORD = "s3cret-pass"


async def api_sign_up(client: httpx.AsyncClient, email: str) -> dict[str, Any]:
    r = await client.post("/v1/auth/sign-up", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return r.json()


async def bearer(client: httpx.AsyncClient, email: str) -> dict[str, str]:
    session = await api_sign_up(client, email)
    return {"Authorization": f"Bearer {session['access_token']}"}


def student_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "name": "Maria Souza",
        "registration_number": "2024001",
        "email": "maria@escola.com",
        "birth_date": "2005-03-15",
    }
    payload.update(overrides)
    return payload
