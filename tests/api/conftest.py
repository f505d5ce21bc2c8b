from typing import AsyncGenerator, Dict

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_api.main import app as main_app
from quiz_api.db.session import get_db


@pytest.fixture(scope="function")
def app() -> FastAPI:
    return main_app


# DBセッションを差し替えるフィクスチャ
@pytest.fixture(scope="function")
def override_get_db(session_factory):
    """本番のget_dbと同様にリクエストごとのセッションでコミット・ロールバックする"""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return _override_get_db


@pytest.fixture(scope="function")
async def async_client(app: FastAPI, override_get_db) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# 認証ヘッダー（トークン保持ユーザー）
@pytest.fixture(scope="function")
def token_headers(db_logged_in_user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {db_logged_in_user.remember_token}"}


# 管理者としてログインし、認証ヘッダーを返す
@pytest.fixture(scope="function")
async def admin_headers(async_client: AsyncClient, db_test_admin, test_admin_data) -> Dict[str, str]:
    response = await async_client.put(
        "/api/v1/auth",
        json={"username": test_admin_data["username"], "password": test_admin_data["password"]}
    )
    return {"Authorization": f"Bearer {response.json()['remember_token']}"}
