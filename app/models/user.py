import re
from datetime import datetime

from pydantic import UUID4, BaseModel, ConfigDict, field_validator


class User(BaseModel):
    """User model representing the profile of a hoot or comment author.

    This is the profile substituted for bare author identifiers in every
    hoot and comment response.

    Attributes:
        user_id: Unique identifier for the user
        username: Unique username for the user
        display_name: User's display name if set
        bio: User's biography if set
        picture: URL to the user's profile picture if set
        created_at: When the account was created
    """

    model_config = ConfigDict(frozen=True)

    user_id: UUID4
    username: str
    display_name: str | None = None
    bio: str | None = None
    picture: str | None = None
    created_at: datetime

    @field_validator("username")
    def validate_username(cls, v: str) -> str:
        if not re.match(r"^[a-zA-Z0-9_]{3,20}$", v):
            raise ValueError("Username must be 3-20 alphanumeric characters")
        return v
