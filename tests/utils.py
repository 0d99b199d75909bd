from contextlib import asynccontextmanager

import httpx

from app.auth import create_access_token
from app.database import get_session
from app.main import app


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@asynccontextmanager
async def app_client(session_factory, user_id: str | None = None):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    headers = auth_headers(user_id) if user_id else {}
    asgi_transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(
            transport=asgi_transport, base_url="http://test", headers=headers
        ) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
