from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import UUID4

from app.api.auth import get_current_user
from app.models.comment import CommentPayload
from app.models.user import User
from app.schemas.responses import CommentResponseSchema, MessageResponseSchema
from app.services.author import AuthorService
from app.services.comment import (
    CommentError,
    CommentNotFoundError,
    CommentPermissionError,
    CommentService,
)
from app.services.hoot import HootError, HootNotFoundError
from app.services.validation import HootValidationError

router = APIRouter(prefix="/hoots/{hoot_id}/comments", tags=["comment"])
comment_service = CommentService()
author_service = AuthorService()


@router.post(
    "", response_model=CommentResponseSchema, status_code=status.HTTP_201_CREATED
)
async def create_comment(
    hoot_id: UUID4,
    comment: CommentPayload,
    current_user: Annotated[User, Depends(get_current_user)],
) -> CommentResponseSchema:
    """Add a comment to a hoot.

    Args:
        hoot_id: ID of the hoot to comment on
        comment: The comment text
        current_user: The authenticated user, recorded as the author

    Returns:
        The created comment with its author's profile

    Raises:
        HTTPException: If the text is invalid or the hoot is not found
    """
    try:
        created = await comment_service.add_comment(hoot_id, current_user, comment)
    except HootValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except HootNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (CommentError, HootError) as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return await author_service.present_comment(created, known=[current_user])


@router.put("/{comment_id}", response_model=MessageResponseSchema)
async def update_comment(
    hoot_id: UUID4,
    comment_id: UUID4,
    comment: CommentPayload,
    current_user: Annotated[User, Depends(get_current_user)],
) -> MessageResponseSchema:
    """Edit the text of a comment.

    Args:
        hoot_id: ID of the hoot holding the comment
        comment_id: ID of the comment to edit
        comment: The new comment text
        current_user: The authenticated user

    Returns:
        Acknowledgement of the update

    Raises:
        HTTPException: If the comment is missing, not the user's, or invalid
    """
    try:
        await comment_service.update_comment(
            hoot_id, comment_id, current_user, comment
        )
    except (HootNotFoundError, CommentNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except CommentPermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except HootValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (CommentError, HootError) as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return MessageResponseSchema(message="Comment updated successfully")


@router.delete("/{comment_id}", response_model=MessageResponseSchema)
async def delete_comment(
    hoot_id: UUID4,
    comment_id: UUID4,
    current_user: Annotated[User, Depends(get_current_user)],
) -> MessageResponseSchema:
    """Remove a comment from a hoot.

    Args:
        hoot_id: ID of the hoot holding the comment
        comment_id: ID of the comment to remove
        current_user: The authenticated user

    Returns:
        Acknowledgement of the removal

    Raises:
        HTTPException: If the comment is missing or not the user's
    """
    try:
        await comment_service.delete_comment(hoot_id, comment_id, current_user)
    except (HootNotFoundError, CommentNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except CommentPermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except (CommentError, HootError) as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return MessageResponseSchema(message="Comment deleted successfully")
