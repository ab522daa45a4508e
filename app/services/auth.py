from typing import Any, cast
from uuid import UUID

import structlog
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from neo4j import ManagedTransaction
from pydantic import UUID4

from app.db import DatabaseManager
from app.models.user import User

logger = structlog.get_logger()


class AuthError(Exception):
    """Base exception for auth-related errors."""

    pass


class InvalidTokenError(AuthError):
    """Exception raised when a token is invalid."""

    pass


class TokenExpiredError(AuthError):
    """Exception raised when a token has expired."""

    pass


class UserNotFoundError(AuthError):
    """Exception raised when the user named by a token cannot be found."""

    pass


class AuthService:
    """Service that turns a bearer token into the requesting user.

    Tokens are JWTs signed with a shared secret. The ``sub`` claim carries
    the user's ID; the user's profile is then loaded from the database so
    that it can be attached to the hoots and comments they write.

    Attributes:
        secret: Key used to verify token signatures
        algorithms: List of accepted JWT algorithms
    """

    def __init__(self) -> None:
        """Initialize the auth service from the environment."""
        from os import environ

        self.secret: str = environ.get("JWT_SECRET", "")
        self.algorithms: list[str] = [environ.get("JWT_ALGORITHM", "HS256")]

    def validate_token(self, token: str) -> dict[str, Any]:
        """Validate a JWT and return its claims.

        Args:
            token: The JWT token to validate

        Returns:
            The decoded token payload

        Raises:
            InvalidTokenError: If token is invalid
            TokenExpiredError: If token has expired
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=self.algorithms)
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JWTClaimsError as e:
            raise InvalidTokenError(f"Invalid claims: {str(e)}")
        except JWTError as e:
            raise InvalidTokenError(f"Invalid token: {str(e)}")

        if not payload.get("sub"):
            raise InvalidTokenError("Token has no subject")
        return cast(dict[str, Any], payload)

    def get_user_id(self, payload: dict[str, Any]) -> UUID4:
        """Read the user ID from a token's ``sub`` claim.

        Raises:
            InvalidTokenError: If the subject is not a UUID
        """
        try:
            return UUID(str(payload["sub"]))
        except ValueError:
            raise InvalidTokenError("Token subject is not a user ID")

    async def get_user(self, user_id: UUID4) -> User:
        """Load a user's profile.

        Raises:
            UserNotFoundError: If no user has that ID
        """
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._get_user, user_id)

    def _get_user(self, tx: ManagedTransaction, user_id: UUID4) -> User:
        query = """
        MATCH (user:User {user_id: $user_id})
        RETURN user
        """
        result = tx.run(query, user_id=str(user_id))
        if record := result.single():
            return User(**dict(record["user"]))
        raise UserNotFoundError(f"User {user_id} not found")

    async def get_current_user(self, token: str) -> User:
        """Get the current authenticated user from token.

        Args:
            token: The JWT token string

        Returns:
            The authenticated user

        Raises:
            InvalidTokenError: If token is invalid
            TokenExpiredError: If token has expired
            UserNotFoundError: If user cannot be found
        """
        payload = self.validate_token(token)
        user_id = self.get_user_id(payload)
        try:
            return await self.get_user(user_id)
        except AuthError:
            raise
        except Exception as e:
            logger.exception("User lookup failed", user_id=str(user_id))
            raise UserNotFoundError(f"Failed to get user: {str(e)}")
