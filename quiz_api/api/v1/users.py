from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from quiz_api.api.deps import get_user_service, require_admin_for_user_create
from quiz_api.core.logging import get_request_logger
from quiz_api.models.user import User
from quiz_api.schemas.user import AdminUserCreate, User as UserResponse
from quiz_api.services.users import UserDirectoryService

router = APIRouter()


@router.post("", response_model=UserResponse)
async def create_user(
    request: Request,
    user_in: AdminUserCreate,
    current_user: Optional[User] = Depends(require_admin_for_user_create),
    user_service: UserDirectoryService = Depends(get_user_service)
    ) -> Any:
    """
    ユーザーを作成するエンドポイント
    - REQUIRE_ADMIN_FOR_USER_CREATEが有効な場合は管理者認証が必要
    - is_admin=Trueの指定は管理者トークンを送った場合のみ許可される
    """
    logger = get_request_logger(request)
    requester = current_user.username if current_user else "anonymous"
    logger.info(f"ユーザー作成リクエスト: {user_in.username}, 要求元={requester}")

    new_user = await user_service.create(
        user_in.username,
        user_in.password,
        is_admin=user_in.is_admin,
        requester=current_user,
    )

    logger.info(f"ユーザー作成成功: ID={new_user.id}, ユーザー名={new_user.username}, 管理者={new_user.is_admin}")
    return new_user


@router.get("", response_model=List[UserResponse])
async def index_users(
    user_service: UserDirectoryService = Depends(get_user_service)
    ) -> Any:
    """全ユーザーを取得するエンドポイント"""
    return await user_service.index()


@router.get("/search", response_model=List[UserResponse])
async def search_users(
    request: Request,
    q: str = Query(..., min_length=1),
    user_service: UserDirectoryService = Depends(get_user_service)
    ) -> Any:
    """ユーザー名の部分一致でユーザーを検索するエンドポイント"""
    logger = get_request_logger(request)
    logger.info(f"ユーザー検索リクエスト: q={q}")

    users = await user_service.search(q)

    logger.info(f"ユーザー検索結果: {len(users)}件")
    return users


@router.get("/{user_id}", response_model=UserResponse)
async def read_user(
    request: Request,
    user_id: UUID,
    user_service: UserDirectoryService = Depends(get_user_service)
    ) -> Any:
    """IDによるユーザー情報取得エンドポイント"""
    logger = get_request_logger(request)
    logger.info(f"ユーザー情報取得リクエスト: 対象ID={user_id}")

    return await user_service.read(user_id)
