from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
from typing import List, Optional, Literal


class Settings(BaseSettings):
    # 環境設定
    ENVIRONMENT: Literal["development", "testing", "production"] = "development"

    # ロギング設定
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/quiz_api.log"

    # 初期ユーザー設定
    CREATE_INITIAL_ADMIN: bool = True
    INITIAL_ADMIN_USERNAME: str = "admin"
    INITIAL_ADMIN_PASSWORD: str = "changeme"  # 本番環境では強力なパスワードに変更
    SEED_DEMO_USER: bool = False
    DEMO_USERNAME: str = "user"
    DEMO_PASSWORD: str = "pwd"

    # データベース設定
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "quiz"
    # 完全なURLを指定した場合はPOSTGRES_*より優先（例: sqlite+aiosqlite:///./quiz.db）
    DATABASE_URL_OVERRIDE: Optional[str] = None
    DB_CREATE_ALL: bool = False

    SQLALCHEMY_ECHO: bool = False

    # パスワードハッシュ設定
    BCRYPT_ROUNDS: int = 10

    # リメンバートークン設定
    REMEMBER_TOKEN_BYTES: int = 16
    # 無効なトークンに対するステータスコード（旧クライアント互換が必要な場合は500）
    INVALID_TOKEN_STATUS_CODE: int = 401

    # ユーザー作成APIを管理者のみに制限するか
    REQUIRE_ADMIN_FOR_USER_CREATE: bool = False

    # CORS設定
    CORS_ORIGINS: List[str] = ["*"]

    @field_validator("REMEMBER_TOKEN_BYTES")
    @classmethod
    def validate_token_bytes(cls, v: int) -> int:
        if v < 16:
            raise ValueError("REMEMBER_TOKEN_BYTES must be at least 16")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        # bcryptが受け付けるコスト係数の範囲
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("INVALID_TOKEN_STATUS_CODE")
    @classmethod
    def validate_invalid_token_status(cls, v: int) -> int:
        if not 400 <= v <= 599:
            raise ValueError("INVALID_TOKEN_STATUS_CODE must be an HTTP error status")
        return v

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
    )


settings = Settings()
