from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from quiz_api.db.base import Base


class User(Base):
    __tablename__ = "users"
    username: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    # セッション保持中のみ値を持つ
    remember_token: Mapped[Optional[str]] = mapped_column(String, unique=True, index=True, nullable=True)
    is_admin: Mapped[bool] = mapped_column(default=False, nullable=False)
