from typing import Any

from app.models.hoot import HootCategory, HootFields, HootPayload

VALID_CATEGORIES: tuple[str, ...] = tuple(c.value for c in HootCategory)


class HootValidationError(Exception):
    """Base exception for rejected hoot or comment content."""

    pass


class InvalidCategoryError(HootValidationError):
    """Exception raised when a category is not one of the hoot categories."""

    pass


class EmptyFieldError(HootValidationError):
    """Exception raised when a required text field is missing or blank."""

    pass


def validate_category(value: str | None) -> HootCategory:
    """Check that a category names one of the hoot categories.

    Matching is exact; "news" is not "News".

    Raises:
        InvalidCategoryError: If the value is missing or unknown
    """
    if value not in VALID_CATEGORIES:
        raise InvalidCategoryError("Invalid category selected.")
    return HootCategory(value)


def validate_text_field(name: str, value: str | None) -> str:
    """Check that a text field has content and return it trimmed.

    Raises:
        EmptyFieldError: If the value is missing or only whitespace
    """
    if value is None or not value.strip():
        raise EmptyFieldError(f"The {name} field must have valid text.")
    return value.strip()


def validate_hoot_create(payload: HootPayload) -> HootFields:
    """Validate the fields for a new hoot; all three are required."""
    category = validate_category(payload.category)
    text = validate_text_field("text", payload.text)
    title = validate_text_field("title", payload.title)
    return HootFields(title=title, text=text, category=category)


def validate_hoot_update(payload: HootPayload) -> dict[str, Any]:
    """Validate the fields supplied for a hoot update.

    Fields left out of the payload are treated as unchanged and do not
    appear in the result.

    Returns:
        Mapping of field name to validated value for the supplied fields
    """
    changes: dict[str, Any] = {}
    if payload.category is not None:
        changes["category"] = validate_category(payload.category)
    if payload.text is not None:
        changes["text"] = validate_text_field("text", payload.text)
    if payload.title is not None:
        changes["title"] = validate_text_field("title", payload.title)
    return changes
