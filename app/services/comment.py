from datetime import UTC, datetime
from uuid import uuid4

import structlog
from pydantic import UUID4

from app.models.comment import Comment, CommentPayload
from app.models.user import User
from app.repositories.hoot import HootStore, Neo4jHootStore
from app.services.hoot import HootError, HootNotFoundError
from app.services.validation import validate_text_field

logger = structlog.get_logger()


class CommentError(Exception):
    """Base exception for comment-related errors."""

    pass


class CommentNotFoundError(CommentError):
    """Exception raised when a comment is not found on its hoot."""

    pass


class CommentPermissionError(CommentError):
    """Exception raised when a user changes a comment they did not write."""

    pass


class CommentCreationError(CommentError):
    """Exception raised when comment creation fails."""

    pass


class CommentUpdateError(CommentError):
    """Exception raised when comment update fails."""

    pass


class CommentDeletionError(CommentError):
    """Exception raised when comment deletion fails."""

    pass


class CommentService:
    """Service for managing the comments embedded in a hoot.

    New comments are appended with a single atomic store operation so that
    comments added at the same time by different users are all kept. Edits
    and removals load the hoot first to check that the comment exists and
    belongs to the caller.

    Attributes:
        store: Persistence for hoot aggregates
    """

    def __init__(self, store: HootStore | None = None) -> None:
        self.store: HootStore = store or Neo4jHootStore()

    async def add_comment(
        self, hoot_id: UUID4, author: User, payload: CommentPayload
    ) -> Comment:
        """Add a comment to the end of a hoot's comments.

        Args:
            hoot_id: ID of the hoot to comment on
            author: The authenticated user; always recorded as the author
            payload: The comment text

        Returns:
            The created comment

        Raises:
            HootValidationError: If the text is missing or blank
            HootNotFoundError: If no hoot has that ID
            CommentCreationError: If the comment could not be stored
        """
        text = validate_text_field("text", payload.text)
        current_time = datetime.now(UTC)
        comment = Comment(
            comment_id=uuid4(),
            author_id=author.user_id,
            text=text,
            created_at=current_time,
            updated_at=current_time,
        )
        try:
            created = await self.store.append_comment(hoot_id, comment)
        except Exception as e:
            logger.exception("Comment creation failed", hoot_id=str(hoot_id))
            raise CommentCreationError(f"Failed to create comment: {str(e)}")
        if created is None:
            raise HootNotFoundError(f"Hoot {hoot_id} not found")

        logger.info(
            "Comment added",
            hoot_id=str(hoot_id),
            comment_id=str(created.comment_id),
            author_id=str(author.user_id),
        )
        return created

    async def _load_own_comment(
        self, hoot_id: UUID4, comment_id: UUID4, user: User, action: str
    ) -> Comment:
        try:
            hoot = await self.store.find_by_id(hoot_id)
        except Exception as e:
            raise HootError(f"Failed to get hoot: {str(e)}")
        if hoot is None:
            raise HootNotFoundError(f"Hoot {hoot_id} not found")

        comment = hoot.find_comment(comment_id)
        if comment is None:
            raise CommentNotFoundError(f"Comment {comment_id} not found")
        if comment.author_id != user.user_id:
            logger.warning(
                "Comment change denied",
                action=action,
                hoot_id=str(hoot_id),
                comment_id=str(comment_id),
                user_id=str(user.user_id),
            )
            raise CommentPermissionError(f"Cannot {action} another user's comment")
        return comment

    async def update_comment(
        self,
        hoot_id: UUID4,
        comment_id: UUID4,
        user: User,
        payload: CommentPayload,
    ) -> Comment:
        """Replace the text of a comment.

        Args:
            hoot_id: ID of the hoot holding the comment
            comment_id: ID of the comment to edit
            user: The authenticated user; must be the comment's author
            payload: The new comment text

        Returns:
            The updated comment

        Raises:
            HootNotFoundError: If no hoot has that ID
            CommentNotFoundError: If the hoot has no comment with that ID
            CommentPermissionError: If the user is not the comment's author
            HootValidationError: If the text is missing or blank
            CommentUpdateError: If the update could not be stored
        """
        await self._load_own_comment(hoot_id, comment_id, user, "update")
        text = validate_text_field("text", payload.text)

        try:
            updated = await self.store.update_comment(
                hoot_id, comment_id, text, datetime.now(UTC)
            )
        except Exception as e:
            logger.exception(
                "Comment update failed",
                hoot_id=str(hoot_id),
                comment_id=str(comment_id),
            )
            raise CommentUpdateError(f"Failed to update comment: {str(e)}")
        if updated is None:
            raise CommentNotFoundError(f"Comment {comment_id} not found")

        logger.info("Comment updated", hoot_id=str(hoot_id), comment_id=str(comment_id))
        return updated

    async def delete_comment(
        self, hoot_id: UUID4, comment_id: UUID4, user: User
    ) -> None:
        """Remove a comment from its hoot.

        Args:
            hoot_id: ID of the hoot holding the comment
            comment_id: ID of the comment to remove
            user: The authenticated user; must be the comment's author

        Raises:
            HootNotFoundError: If no hoot has that ID
            CommentNotFoundError: If the hoot has no comment with that ID
            CommentPermissionError: If the user is not the comment's author
            CommentDeletionError: If the removal could not be stored
        """
        await self._load_own_comment(hoot_id, comment_id, user, "delete")

        try:
            removed = await self.store.remove_comment(hoot_id, comment_id)
        except Exception as e:
            logger.exception(
                "Comment deletion failed",
                hoot_id=str(hoot_id),
                comment_id=str(comment_id),
            )
            raise CommentDeletionError(f"Failed to delete comment: {str(e)}")
        if not removed:
            raise CommentNotFoundError(f"Comment {comment_id} not found")

        logger.info("Comment deleted", hoot_id=str(hoot_id), comment_id=str(comment_id))
