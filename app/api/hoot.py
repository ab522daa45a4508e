from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import UUID4

from app.api.auth import get_current_user
from app.models.hoot import HootPayload
from app.models.user import User
from app.schemas.responses import HootResponseSchema
from app.services.author import AuthorService
from app.services.hoot import (
    HootError,
    HootNotFoundError,
    HootPermissionError,
    HootService,
)
from app.services.validation import HootValidationError

router = APIRouter(prefix="/hoots", tags=["hoot"])
hoot_service = HootService()
author_service = AuthorService()


@router.post(
    "", response_model=HootResponseSchema, status_code=status.HTTP_201_CREATED
)
async def create_hoot(
    hoot: HootPayload,
    current_user: Annotated[User, Depends(get_current_user)],
) -> HootResponseSchema:
    """Create a new hoot.

    The authenticated user is always recorded as the author, whatever the
    request body says.

    Args:
        hoot: The title, text and category of the hoot
        current_user: The authenticated user

    Returns:
        The created hoot with its author's profile

    Raises:
        HTTPException: If validation or creation fails
    """
    try:
        created = await hoot_service.create_hoot(current_user, hoot)
    except HootValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except HootError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return await author_service.present_hoot(created, known=[current_user])


@router.get("", response_model=list[HootResponseSchema])
async def get_hoots(
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[HootResponseSchema]:
    """List every hoot, newest first.

    Args:
        current_user: The authenticated user

    Returns:
        All hoots with author profiles attached

    Raises:
        HTTPException: If fetching hoots fails
    """
    try:
        hoots = await hoot_service.get_hoots()
    except HootError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return await author_service.present_hoots(hoots, known=[current_user])


@router.get("/{hoot_id}", response_model=HootResponseSchema)
async def get_hoot(
    hoot_id: UUID4,
    current_user: Annotated[User, Depends(get_current_user)],
) -> HootResponseSchema:
    """Get a hoot and its comments.

    Args:
        hoot_id: ID of the hoot to get
        current_user: The authenticated user

    Returns:
        The hoot with its author and every comment author's profile

    Raises:
        HTTPException: If the hoot is not found
    """
    try:
        hoot = await hoot_service.get_hoot(hoot_id)
    except HootNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except HootError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return await author_service.present_hoot(hoot, known=[current_user])


@router.put("/{hoot_id}", response_model=HootResponseSchema)
async def update_hoot(
    hoot_id: UUID4,
    hoot: HootPayload,
    current_user: Annotated[User, Depends(get_current_user)],
) -> HootResponseSchema:
    """Update a hoot.

    Args:
        hoot_id: ID of the hoot to update
        hoot: The fields to change; omitted fields are left as they are
        current_user: The authenticated user

    Returns:
        The updated hoot

    Raises:
        HTTPException: If the hoot is missing, not the user's, or invalid
    """
    try:
        updated = await hoot_service.update_hoot(hoot_id, current_user, hoot)
    except HootNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except HootPermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except HootValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except HootError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return await author_service.present_hoot(updated, known=[current_user])


@router.delete("/{hoot_id}", response_model=HootResponseSchema)
async def delete_hoot(
    hoot_id: UUID4,
    current_user: Annotated[User, Depends(get_current_user)],
) -> HootResponseSchema:
    """Delete a hoot and its comments.

    Args:
        hoot_id: ID of the hoot to delete
        current_user: The authenticated user

    Returns:
        The hoot as it was before deletion

    Raises:
        HTTPException: If the hoot is missing or not the user's
    """
    try:
        deleted = await hoot_service.delete_hoot(hoot_id, current_user)
    except HootNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except HootPermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except HootError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return await author_service.present_hoot(deleted, known=[current_user])
