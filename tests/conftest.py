import os

# 設定はインポート時に読み込まれるため、アプリのインポートより前に上書きする
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from quiz_api.db.base import Base
from quiz_api.models.user import User
from quiz_api.core.security import get_password_hash


# テストごとの一時ファイルSQLiteデータベース（セッションごとに別コネクション）
@pytest.fixture(scope="function")
async def db_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# テストユーザーデータ
@pytest.fixture(scope="function")
def test_user_data():
    return {
        "username": "testuser",
        "password": "testpassword"
    }


# テスト管理者データ
@pytest.fixture(scope="function")
def test_admin_data():
    return {
        "username": "admin",
        "password": "adminpass",
        "is_admin": True
    }


# DBに登録済みのテストユーザー
@pytest.fixture(scope="function")
async def db_test_user(db_session, test_user_data):
    user = User(
        username=test_user_data["username"],
        hashed_password=get_password_hash(test_user_data["password"]),
        is_admin=False
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


# DBに登録済みのテスト管理者
@pytest.fixture(scope="function")
async def db_test_admin(db_session, test_admin_data):
    admin = User(
        username=test_admin_data["username"],
        hashed_password=get_password_hash(test_admin_data["password"]),
        is_admin=True
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


# リメンバートークンを保持しているテストユーザー
@pytest.fixture(scope="function")
async def db_logged_in_user(db_session, db_test_user):
    db_test_user.remember_token = "a" * 32
    await db_session.commit()
    await db_session.refresh(db_test_user)
    return db_test_user
