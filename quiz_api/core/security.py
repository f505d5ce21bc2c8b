import secrets
from typing import Optional

from passlib.context import CryptContext

from quiz_api.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # 不正な形式のハッシュは不一致として扱う
        return False


def generate_remember_token() -> str:
    """
    リメンバートークンを生成する関数

    Returns:
        str: 暗号論的に安全な乱数から生成した16進文字列
    """
    return secrets.token_hex(settings.REMEMBER_TOKEN_BYTES)
