from datetime import datetime

from pydantic import UUID4, BaseModel, ConfigDict, Field

from app.models.hoot import HootCategory
from app.models.user import User


class HealthCheckResponseSchema(BaseModel):
    success: bool


class MessageResponseSchema(BaseModel):
    """Acknowledgement returned by mutations that have no body to return.

    Attributes:
        message: What was done
    """

    message: str


class CommentResponseSchema(BaseModel):
    """A comment with its author's profile in place of the author ID.

    Attributes:
        comment_id: Unique identifier of the comment
        author: Profile of the comment's author, None if the user is gone
        text: The text content of the comment
        created_at: When the comment was added
        updated_at: When the comment text last changed
    """

    model_config = ConfigDict(frozen=True)

    comment_id: UUID4
    author: User | None
    text: str
    created_at: datetime
    updated_at: datetime


class HootResponseSchema(BaseModel):
    """A hoot with author profiles in place of author IDs.

    Attributes:
        hoot_id: Unique identifier for the hoot
        author: Profile of the hoot's author, None if the user is gone
        title: Title of the hoot
        text: Body text of the hoot
        category: Category of the hoot
        comments: Comments in the order they were added
        created_at: When the hoot was created
        updated_at: When the hoot fields last changed
    """

    model_config = ConfigDict(frozen=True)

    hoot_id: UUID4
    author: User | None
    title: str
    text: str
    category: HootCategory
    comments: list[CommentResponseSchema] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
