from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from quiz_api.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from quiz_api.crud.user import user as user_crud
from quiz_api.models.user import User
from quiz_api.services.auth import create_user, require_credentials


class UserDirectoryService:
    """ユーザーの作成・一覧・取得・検索を担当するサービス"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
            self,
            username: str | None,
            password: str | None,
            is_admin: bool = False,
            requester: Optional[User] = None,
            ) -> User:
        """
        ユーザーを作成する

        Raises:
            PermissionDeniedError: 管理者以外が管理者ユーザーの作成を要求した場合
        """
        require_credentials(username, password)
        if is_admin and not (requester and requester.is_admin):
            raise PermissionDeniedError()
        return await create_user(self.db, username, password, is_admin=is_admin)

    async def index(self) -> List[User]:
        return await user_crud.get_all_users(self.db)

    async def read(self, user_id: UUID) -> User:
        db_user = await user_crud.get_by_id(self.db, user_id)
        if not db_user:
            raise NotFoundError()
        return db_user

    async def search(self, query: str | None) -> List[User]:
        if not query:
            raise ValidationError("Search query is required")
        return await user_crud.search_by_username(self.db, query)
