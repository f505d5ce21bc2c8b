from fastapi import status

from quiz_api.core.config import settings


class QuizAPIError(Exception):
    """リクエスト境界でステータスコードと{"message": ...}に変換されるドメイン例外の基底クラス"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(QuizAPIError):
    # HTTP_422_UNPROCESSABLE_ENTITYは非推奨のため数値で指定する
    status_code = 422
    default_message = "Username and password are required"


class AuthenticationError(QuizAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Incorrect password"


class InvalidTokenError(QuizAPIError):
    default_message = "Invalid token"

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return settings.INVALID_TOKEN_STATUS_CODE


class NotFoundError(QuizAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class UsernameTakenError(QuizAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Username already exists"


class PermissionDeniedError(QuizAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin privileges required"
