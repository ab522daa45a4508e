from datetime import datetime
from enum import Enum

from pydantic import UUID4, BaseModel, ConfigDict, Field

from app.models.comment import Comment


class HootCategory(str, Enum):
    """The fixed set of categories a hoot can be filed under."""

    NEWS = "News"
    SPORTS = "Sports"
    GAMES = "Games"
    MOVIES = "Movies"
    MUSIC = "Music"
    TELEVISION = "Television"


class HootPayload(BaseModel):
    """Request body for creating or updating a hoot.

    Every field is optional at this level; the hoot service decides which
    ones are required. Unknown keys, including any ``author``, are ignored.

    Attributes:
        title: Title of the hoot
        text: Body text of the hoot
        category: Name of one of the hoot categories
    """

    title: str | None = None
    text: str | None = None
    category: str | None = None


class HootFields(BaseModel):
    """Validated, trimmed content fields of a hoot."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    text: str = Field(min_length=1)
    category: HootCategory


class Hoot(HootFields):
    """Model representing a hoot together with its embedded comments.

    A hoot is the aggregate root: its comments have no identity outside it
    and are loaded and deleted with it.

    Attributes:
        hoot_id: Unique identifier for the hoot
        author_id: ID of the user who created the hoot
        comments: Comments in the order they were added
        created_at: When the hoot was created
        updated_at: When the hoot fields last changed
    """

    hoot_id: UUID4
    author_id: UUID4
    comments: list[Comment] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    def find_comment(self, comment_id: UUID4) -> Comment | None:
        """Return the comment with the given ID, or None if it is not here."""
        return next(
            (c for c in self.comments if c.comment_id == comment_id),
            None,
        )
