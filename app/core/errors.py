# errors.py
# Error taxonomy shared by the store, the token service and the API layer.
# Each error carries the HTTP status it is rendered with.

from fastapi import status


class RecipeAPIError(Exception):
    """
    Base class for errors that are safe to show to API clients.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Request failed"
    headers = None

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    @property
    def error(self) -> str:
        return type(self).__name__


class DuplicateUsername(RecipeAPIError):
    message = "Username already registered"


class UserNotFound(RecipeAPIError):
    message = "User not found"


class InvalidPassword(RecipeAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Incorrect username or password"


class AuthenticationError(RecipeAPIError):
    """
    Any failure to authenticate a bearer token.
    """
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Could not validate credentials"
    headers = {"WWW-Authenticate": "Bearer"}


class TokenMissing(AuthenticationError):
    message = "Not authenticated"


class TokenMalformed(AuthenticationError):
    message = "Invalid authentication token"


class TokenExpired(AuthenticationError):
    message = "Authentication token has expired"


class Forbidden(RecipeAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Not authorized to access this recipe"


class RecipeNotFound(RecipeAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Recipe not found"


class StoreUnavailable(RecipeAPIError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Storage is temporarily unavailable"
