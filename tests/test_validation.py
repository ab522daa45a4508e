import pytest

from app.models.hoot import HootCategory, HootPayload
from app.services.validation import (
    VALID_CATEGORIES,
    EmptyFieldError,
    InvalidCategoryError,
    validate_category,
    validate_hoot_create,
    validate_hoot_update,
    validate_text_field,
)


@pytest.mark.unit
class TestValidation:
    def test_categories_are_fixed(self):
        assert VALID_CATEGORIES == (
            "News",
            "Sports",
            "Games",
            "Movies",
            "Music",
            "Television",
        )

    @pytest.mark.parametrize("category", ["Politics", "news", "", None])
    def test_invalid_category_rejected(self, category):
        with pytest.raises(InvalidCategoryError, match="Invalid category"):
            validate_category(category)

    def test_valid_category_becomes_enum(self):
        assert validate_category("Music") is HootCategory.MUSIC

    @pytest.mark.parametrize("value", [None, "", "   ", "\n\t"])
    def test_blank_text_rejected(self, value):
        with pytest.raises(EmptyFieldError, match="title"):
            validate_text_field("title", value)

    def test_text_is_trimmed(self):
        assert validate_text_field("text", "  hello  ") == "hello"

    def test_create_requires_all_fields(self):
        # Arrange
        payload = HootPayload(title="Title", category="News")

        # Act & Assert
        with pytest.raises(EmptyFieldError, match="text"):
            validate_hoot_create(payload)

    def test_create_checks_category_first(self):
        payload = HootPayload(title=" ", text=" ", category="Weather")
        with pytest.raises(InvalidCategoryError):
            validate_hoot_create(payload)

    def test_create_returns_trimmed_fields(self):
        # Arrange
        payload = HootPayload(title=" Title ", text=" Body ", category="Games")

        # Act
        fields = validate_hoot_create(payload)

        # Assert
        assert fields.title == "Title"
        assert fields.text == "Body"
        assert fields.category is HootCategory.GAMES

    def test_update_accepts_empty_payload(self):
        assert validate_hoot_update(HootPayload()) == {}

    def test_update_returns_only_supplied_fields(self):
        changes = validate_hoot_update(HootPayload(text=" New text "))
        assert changes == {"text": "New text"}

    def test_update_rejects_blank_supplied_field(self):
        with pytest.raises(EmptyFieldError):
            validate_hoot_update(HootPayload(title="   "))

    def test_update_rejects_invalid_supplied_category(self):
        with pytest.raises(InvalidCategoryError):
            validate_hoot_update(HootPayload(category="Cooking"))
