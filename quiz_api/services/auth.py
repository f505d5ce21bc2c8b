from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_api.core.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    NotFoundError,
    UsernameTakenError,
    ValidationError,
)
from quiz_api.core.logging import app_logger
from quiz_api.core.security import generate_remember_token, verify_password
from quiz_api.crud.user import user as user_crud
from quiz_api.models.user import User


def require_credentials(username: str | None, password: str | None) -> None:
    """ユーザー名とパスワードが両方とも空でないことを確認する"""
    if not username or not password:
        raise ValidationError()


async def create_user(db: AsyncSession, username: str, password: str, is_admin: bool = False) -> User:
    """
    重複チェックを行ってユーザーを作成する

    Raises:
        UsernameTakenError: ユーザー名が既に使用されている場合
    """
    if await user_crud.get_by_username(db, username):
        raise UsernameTakenError()
    try:
        return await user_crud.create(db, username=username, password=password, is_admin=is_admin)
    except IntegrityError:
        # 同時登録で一意制約に違反した場合（ロールバックは呼び出し元に任せる）
        raise UsernameTakenError()


class AuthService:
    """登録・ログイン・ログアウト・トークン検証を担当するサービス"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, username: str | None, password: str | None) -> User:
        require_credentials(username, password)
        new_user = await create_user(self.db, username, password)
        app_logger.info(f"User registered: id={new_user.id}, username={new_user.username}")
        return new_user

    async def login(self, username: str | None, password: str | None) -> User:
        require_credentials(username, password)

        db_user = await user_crud.get_by_username(self.db, username)
        if not db_user:
            raise NotFoundError()

        # パスワード不一致の場合は既存のトークンを変更しない
        if not verify_password(password, db_user.hashed_password):
            raise AuthenticationError()

        token = generate_remember_token()
        db_user = await user_crud.set_remember_token(self.db, db_user, token)
        app_logger.info(f"User logged in: id={db_user.id}")
        return db_user

    async def logout(self, token: str | None) -> None:
        if not token:
            raise InvalidTokenError()
        if not await user_crud.clear_remember_token(self.db, token):
            raise InvalidTokenError()

    async def verify_token(self, token: str | None) -> User:
        if not token:
            raise InvalidTokenError()
        db_user = await user_crud.get_by_remember_token(self.db, token)
        if not db_user:
            raise InvalidTokenError()
        return db_user
