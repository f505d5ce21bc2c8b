from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from quiz_api.models.user import User
from quiz_api.core.security import get_password_hash


def _escape_like(value: str) -> str:
    """LIKEのワイルドカードをリテラルとして扱うためにエスケープする"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CRUDUser:
    async def create(self, db: AsyncSession, username: str, password: str, is_admin: bool = False) -> User:
        db_obj = User(
            username=username,
            hashed_password=get_password_hash(password),
            is_admin=is_admin
        )
        db.add(db_obj)
        # コミットは呼び出し元に任せる
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def get_all_users(self, db: AsyncSession) -> List[User]:
        result = await db.execute(select(User).order_by(User.created_at, User.username))
        return list(result.scalars().all())

    async def get_by_id(self, db: AsyncSession, id: UUID) -> Optional[User]:
        result = await db.execute(select(User).filter(User.id == id))
        return result.scalar_one_or_none()

    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        # ユーザー名は大文字小文字を区別して完全一致で比較する
        result = await db.execute(select(User).filter(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_remember_token(self, db: AsyncSession, token: str) -> Optional[User]:
        result = await db.execute(select(User).filter(User.remember_token == token))
        return result.scalar_one_or_none()

    async def search_by_username(self, db: AsyncSession, query: str) -> List[User]:
        """
        ユーザー名の部分一致検索（大文字小文字を区別しない）

        Args:
            db: データベースセッション
            query: 検索文字列（%と_はリテラルとして扱う）

        Returns:
            List[User]: 一致したユーザーのリスト
        """
        pattern = f"%{_escape_like(query)}%"
        result = await db.execute(
            select(User)
            .filter(User.username.ilike(pattern, escape="\\"))
            .order_by(User.username)
        )
        return list(result.scalars().all())

    async def set_remember_token(self, db: AsyncSession, db_obj: User, token: str) -> User:
        db_obj.remember_token = token
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def clear_remember_token(self, db: AsyncSession, token: str) -> bool:
        """
        トークンに一致するユーザーのトークンを単一の条件付きUPDATEで消去する

        Returns:
            bool: 消去した行があればTrue
        """
        result = await db.execute(
            update(User)
            .where(User.remember_token == token)
            .values(remember_token=None)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount > 0

    async def delete(self, db: AsyncSession, db_obj: User) -> None:
        await db.delete(db_obj)
        # コミットは呼び出し元に任せる
        await db.flush()


user = CRUDUser()
