from typing import Any, Optional

from fastapi import APIRouter, Depends, Request

from quiz_api.api.deps import get_auth_service, oauth2_scheme
from quiz_api.core.logging import get_request_logger
from quiz_api.schemas.user import (
    LoginRequest,
    LoginResponse,
    Message,
    TokenVerifyResponse,
    User as UserResponse,
    UserCreate,
)
from quiz_api.services.auth import AuthService

router = APIRouter()


@router.post("/register", response_model=UserResponse)
async def register_user(
    request: Request,
    user_in: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
    ) -> Any:
    """
    一般ユーザーを登録するエンドポイント
    - 認証不要
    - 常にis_admin=Falseで登録される
    """
    logger = get_request_logger(request)
    logger.info(f"ユーザー登録リクエスト: {user_in.username}")

    new_user = await auth_service.register(user_in.username, user_in.password)

    logger.info(f"ユーザー登録成功: ID={new_user.id}, ユーザー名={new_user.username}")
    return new_user


@router.put("", response_model=LoginResponse)
async def login(
    request: Request,
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
    ) -> Any:
    """
    ログインしてリメンバートークンを発行するエンドポイント
    - 成功するたびに新しいトークンが発行される
    """
    logger = get_request_logger(request)
    logger.info(f"ログインリクエスト: ユーザー名={credentials.username}")

    db_user = await auth_service.login(credentials.username, credentials.password)

    logger.info(f"ログイン成功: ユーザーID={db_user.id}")
    return db_user


@router.get("", response_model=TokenVerifyResponse)
async def verify_token(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service)
    ) -> Any:
    """
    Bearerトークンを検証するエンドポイント
    """
    logger = get_request_logger(request)
    logger.info("トークン検証リクエスト")

    db_user = await auth_service.verify_token(token)

    logger.info(f"トークン検証成功: ユーザーID={db_user.id}")
    return {"message": "User found", "user": UserResponse.model_validate(db_user)}


@router.delete("", response_model=Message)
async def logout(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service)
    ) -> Any:
    """
    ログアウトしてリメンバートークンを無効化するエンドポイント
    """
    logger = get_request_logger(request)
    logger.info("ログアウトリクエスト")

    await auth_service.logout(token)

    logger.info("ログアウト成功: トークンを無効化しました")
    return {"message": "User logged out"}
