from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


# 認証情報（登録・ログイン共通）
class UserCredentials(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# 新規ユーザー登録
class UserCreate(UserCredentials):
    pass


# 管理者によるユーザー作成
class AdminUserCreate(UserCreate):
    is_admin: bool = False


# ログインリクエスト
class LoginRequest(UserCredentials):
    pass


# レスポンスとして返すユーザー情報（パスワードハッシュとトークンは含めない）
class User(BaseModel):
    id: UUID
    username: str
    is_admin: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


# ログイン成功時のレスポンス
class LoginResponse(User):
    remember_token: str


# メッセージのみのレスポンス
class Message(BaseModel):
    message: str


# トークン検証成功時のレスポンス
class TokenVerifyResponse(Message):
    user: User
