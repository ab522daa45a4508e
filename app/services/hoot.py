from datetime import UTC, datetime
from uuid import uuid4

import structlog
from pydantic import UUID4

from app.models.hoot import Hoot, HootPayload
from app.models.user import User
from app.repositories.hoot import HootStore, Neo4jHootStore
from app.services.validation import validate_hoot_create, validate_hoot_update

logger = structlog.get_logger()


class HootError(Exception):
    """Base exception for hoot-related errors."""

    pass


class HootNotFoundError(HootError):
    """Exception raised when a hoot is not found."""

    pass


class HootPermissionError(HootError):
    """Exception raised when a user changes a hoot they did not write."""

    pass


class HootCreationError(HootError):
    """Exception raised when hoot creation fails."""

    pass


class HootUpdateError(HootError):
    """Exception raised when hoot update fails."""

    pass


class HootDeletionError(HootError):
    """Exception raised when hoot deletion fails."""

    pass


class HootService:
    """Service for creating, reading, updating and deleting hoots.

    Mutations check that the hoot exists before checking that the caller
    wrote it, so a missing hoot is always reported as not found.

    Attributes:
        store: Persistence for hoot aggregates
    """

    def __init__(self, store: HootStore | None = None) -> None:
        self.store: HootStore = store or Neo4jHootStore()

    async def create_hoot(self, author: User, payload: HootPayload) -> Hoot:
        """Create a new hoot written by the given user.

        Args:
            author: The authenticated user; always recorded as the author
            payload: The requested title, text and category

        Returns:
            The created hoot, with no comments

        Raises:
            HootValidationError: If a field is missing, blank or invalid
            HootCreationError: If the hoot could not be stored
        """
        fields = validate_hoot_create(payload)
        current_time = datetime.now(UTC)
        hoot = Hoot(
            **fields.model_dump(),
            hoot_id=uuid4(),
            author_id=author.user_id,
            created_at=current_time,
            updated_at=current_time,
        )
        try:
            created = await self.store.create(hoot)
        except Exception as e:
            logger.exception("Hoot creation failed", author_id=str(author.user_id))
            raise HootCreationError(f"Failed to create hoot: {str(e)}")

        logger.info(
            "Hoot created",
            hoot_id=str(created.hoot_id),
            author_id=str(author.user_id),
            category=created.category.value,
        )
        return created

    async def get_hoots(self) -> list[Hoot]:
        """Get every hoot, newest first.

        Raises:
            HootError: If fetching hoots fails
        """
        try:
            return await self.store.find_all()
        except Exception as e:
            raise HootError(f"Failed to get hoots: {str(e)}")

    async def get_hoot(self, hoot_id: UUID4) -> Hoot:
        """Get a hoot and its comments by ID.

        Raises:
            HootNotFoundError: If no hoot has that ID
            HootError: If fetching the hoot fails
        """
        try:
            hoot = await self.store.find_by_id(hoot_id)
        except Exception as e:
            raise HootError(f"Failed to get hoot: {str(e)}")
        if hoot is None:
            raise HootNotFoundError(f"Hoot {hoot_id} not found")
        return hoot

    def _check_author(self, hoot: Hoot, user: User, action: str) -> None:
        if hoot.author_id != user.user_id:
            logger.warning(
                "Hoot change denied",
                action=action,
                hoot_id=str(hoot.hoot_id),
                user_id=str(user.user_id),
            )
            raise HootPermissionError(f"Cannot {action} another user's hoot")

    async def update_hoot(
        self, hoot_id: UUID4, user: User, payload: HootPayload
    ) -> Hoot:
        """Update the supplied fields of a hoot.

        Fields left out of the payload keep their current values. The
        author, ID and comments are never changed.

        Args:
            hoot_id: ID of the hoot to update
            user: The authenticated user; must be the hoot's author
            payload: The fields to change

        Returns:
            The updated hoot

        Raises:
            HootNotFoundError: If no hoot has that ID
            HootPermissionError: If the user is not the author
            HootValidationError: If a supplied field is blank or invalid
            HootUpdateError: If the update could not be stored
        """
        hoot = await self.get_hoot(hoot_id)
        self._check_author(hoot, user, "update")
        changes = validate_hoot_update(payload)
        changes["updated_at"] = datetime.now(UTC)

        try:
            updated = await self.store.update(hoot_id, changes)
        except Exception as e:
            logger.exception("Hoot update failed", hoot_id=str(hoot_id))
            raise HootUpdateError(f"Failed to update hoot: {str(e)}")
        if updated is None:
            raise HootNotFoundError(f"Hoot {hoot_id} not found")

        logger.info(
            "Hoot updated",
            hoot_id=str(hoot_id),
            fields=sorted(k for k in changes if k != "updated_at"),
        )
        return updated

    async def delete_hoot(self, hoot_id: UUID4, user: User) -> Hoot:
        """Delete a hoot together with all of its comments.

        Args:
            hoot_id: ID of the hoot to delete
            user: The authenticated user; must be the hoot's author

        Returns:
            The hoot as it was before deletion

        Raises:
            HootNotFoundError: If no hoot has that ID
            HootPermissionError: If the user is not the author
            HootDeletionError: If the deletion could not be stored
        """
        hoot = await self.get_hoot(hoot_id)
        self._check_author(hoot, user, "delete")

        try:
            deleted = await self.store.delete(hoot_id)
        except Exception as e:
            logger.exception("Hoot deletion failed", hoot_id=str(hoot_id))
            raise HootDeletionError(f"Failed to delete hoot: {str(e)}")
        if not deleted:
            raise HootNotFoundError(f"Hoot {hoot_id} not found")

        logger.info(
            "Hoot deleted", hoot_id=str(hoot_id), comment_count=len(hoot.comments)
        )
        return hoot
