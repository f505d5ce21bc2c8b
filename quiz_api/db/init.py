from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from quiz_api.core.config import settings
from quiz_api.core.logging import app_logger as logger
from quiz_api.crud.user import user as user_crud
from quiz_api.db.base import Base
from quiz_api.models.user import User  # noqa: F401  メタデータへの登録


class Database:
    """データベース初期化を担当するクラス"""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def init(self) -> bool:
        """
        データベースの初期化処理を行います。
        本番環境ではAlembicのマイグレーションでテーブルを作成し、
        DB_CREATE_ALLが有効な場合のみここでテーブルを作成します。
        """
        logger.info("Initializing database...")

        if settings.DB_CREATE_ALL:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

        logger.info("Database initialization completed")
        return True


async def _ensure_user(session: AsyncSession, username: str, password: str, is_admin: bool) -> bool:
    """ユーザーが存在しなければ作成する。作成した場合はTrueを返す"""
    if await user_crud.get_by_username(session, username):
        logger.info(f"User '{username}' already exists")
        return False
    try:
        await user_crud.create(session, username=username, password=password, is_admin=is_admin)
        await session.commit()
    except IntegrityError:
        # 他のプロセスが既にユーザーを作成している場合
        await session.rollback()
        logger.info(f"User '{username}' already created by another process")
        return False
    logger.info(f"User '{username}' created successfully (admin={is_admin})")
    return True


async def seed_initial_users(session: AsyncSession) -> None:
    """初期管理者とデモユーザーを作成する"""
    if settings.CREATE_INITIAL_ADMIN:
        await _ensure_user(
            session,
            settings.INITIAL_ADMIN_USERNAME,
            settings.INITIAL_ADMIN_PASSWORD,
            is_admin=True,
        )
    if settings.SEED_DEMO_USER:
        await _ensure_user(
            session,
            settings.DEMO_USERNAME,
            settings.DEMO_PASSWORD,
            is_admin=False,
        )
