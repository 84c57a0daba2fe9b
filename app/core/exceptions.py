from typing import Optional

from fastapi import status


class PoitError(Exception):
    """Базовая ошибка приложения: код ответа и короткое сообщение"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(PoitError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class Unauthorized(PoitError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(PoitError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(PoitError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Internal(PoitError):
    pass
