from datetime import datetime

from pydantic import UUID4, BaseModel, ConfigDict, Field


class CommentPayload(BaseModel):
    """Request body for creating or editing a comment.

    The text is validated by the comment service rather than here so that
    a blank or missing value is reported as a 400 with a specific message.
    Unknown keys, including any ``author``, are ignored.

    Attributes:
        text: The text content of the comment
    """

    text: str | None = None


class Comment(BaseModel):
    """Model representing a comment embedded in a hoot.

    Attributes:
        comment_id: Unique identifier of the comment within its hoot
        author_id: ID of the user who wrote the comment
        text: The text content of the comment
        created_at: When the comment was added
        updated_at: When the comment text last changed
    """

    model_config = ConfigDict(frozen=True)

    comment_id: UUID4
    author_id: UUID4
    text: str = Field(min_length=1)
    created_at: datetime
    updated_at: datetime
