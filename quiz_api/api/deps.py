from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_api.core.config import settings
from quiz_api.core.exceptions import InvalidTokenError, PermissionDeniedError
from quiz_api.db.session import get_db
from quiz_api.models.user import User
from quiz_api.services.auth import AuthService
from quiz_api.services.users import UserDirectoryService

# ヘッダーが無い場合もInvalidTokenErrorとして扱うためauto_errorは無効にする
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth", auto_error=False)


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserDirectoryService:
    return UserDirectoryService(db)


async def get_current_user(
        token: Optional[str] = Depends(oauth2_scheme),
        auth_service: AuthService = Depends(get_auth_service)
        ) -> User:
    """
    リメンバートークンからユーザーを取得する依存関数

    Raises:
        InvalidTokenError: トークンが無い、または一致するユーザーがいない場合
    """
    return await auth_service.verify_token(token)


async def get_current_admin_user(
        current_user: User = Depends(get_current_user)
        ) -> User:
    """現在のユーザーが管理者であることを確認する依存関数"""
    if not current_user.is_admin:
        raise PermissionDeniedError()
    return current_user


async def get_optional_current_user(
        token: Optional[str] = Depends(oauth2_scheme),
        auth_service: AuthService = Depends(get_auth_service)
        ) -> Optional[User]:
    """トークンが送られた場合のみユーザーを解決する（未送信ならNone）"""
    if not token:
        return None
    return await auth_service.verify_token(token)


async def require_admin_for_user_create(
        current_user: Optional[User] = Depends(get_optional_current_user)
        ) -> Optional[User]:
    """
    ユーザー作成の要求元を返す依存関数
    REQUIRE_ADMIN_FOR_USER_CREATEが有効な場合は管理者認証を要求する
    """
    if not settings.REQUIRE_ADMIN_FOR_USER_CREATE:
        return current_user
    if current_user is None:
        raise InvalidTokenError()
    return await get_current_admin_user(current_user)
