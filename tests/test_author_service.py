from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from app.models.user import User
from app.services.author import AuthorService


@pytest.mark.unit
class TestAuthorService:
    @pytest.mark.asyncio
    async def test_present_hoot_resolves_all_authors(
        self,
        author_service: AuthorService,
        test_user: User,
        another_test_user: User,
        hoot_factory,
        comment_factory,
    ):
        # Arrange
        hoot = hoot_factory(
            test_user,
            comments=[
                comment_factory(another_test_user, "first"),
                comment_factory(test_user, "second"),
            ],
        )
        with patch.object(
            author_service, "get_authors", new=AsyncMock()
        ) as mock_get_authors:
            mock_get_authors.return_value = {
                another_test_user.user_id: another_test_user
            }

            # Act
            result = await author_service.present_hoot(hoot, known=[test_user])

            # Assert
            assert result.author == test_user
            assert result.comments[0].author == another_test_user
            assert result.comments[1].author == test_user
            assert [c.text for c in result.comments] == ["first", "second"]
            looked_up = list(mock_get_authors.call_args.args[0])
            assert looked_up == [another_test_user.user_id]

    @pytest.mark.asyncio
    async def test_present_hoot_skips_lookup_for_known_author(
        self, author_service: AuthorService, test_user: User, hoot_factory
    ):
        with patch.object(
            author_service, "get_authors", new=AsyncMock()
        ) as mock_get_authors:
            result = await author_service.present_hoot(
                hoot_factory(test_user), known=[test_user]
            )

            assert result.author == test_user
            mock_get_authors.assert_not_called()

    @pytest.mark.asyncio
    async def test_present_hoots_missing_author_is_none(
        self, author_service: AuthorService, test_user: User, hoot_factory
    ):
        with patch.object(
            author_service, "get_authors", new=AsyncMock()
        ) as mock_get_authors:
            mock_get_authors.return_value = {}

            [result] = await author_service.present_hoots([hoot_factory(test_user)])

            assert result.author is None

    @pytest.mark.asyncio
    async def test_present_comment(
        self, author_service: AuthorService, test_user: User, comment_factory
    ):
        comment = comment_factory(test_user, "Hello")

        result = await author_service.present_comment(comment, known=[test_user])

        assert result.comment_id == comment.comment_id
        assert result.author == test_user
        assert result.text == "Hello"

    @pytest.mark.asyncio
    async def test_get_authors_single_query(
        self, author_service: AuthorService, test_user: User
    ):
        # Arrange
        tx = MagicMock()
        tx.run.return_value = [{"user": test_user.model_dump(mode="json")}]
        with patch("app.services.author.DatabaseManager") as manager_cls:
            session = manager_cls.return_value.driver.session.return_value
            session = session.__enter__.return_value
            session.execute_read.side_effect = lambda fn, *args: fn(tx, *args)

            # Act
            result = await author_service.get_authors(
                [test_user.user_id, test_user.user_id, uuid4()]
            )

        # Assert
        assert result == {test_user.user_id: test_user}
        tx.run.assert_called_once()
        assert len(tx.run.call_args.kwargs["user_ids"]) == 2

    @pytest.mark.asyncio
    async def test_get_authors_empty(self, author_service: AuthorService):
        with patch("app.services.author.DatabaseManager") as manager_cls:
            assert await author_service.get_authors([]) == {}
            manager_cls.assert_not_called()
