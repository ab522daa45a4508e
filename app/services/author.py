from collections.abc import Iterable

from neo4j import ManagedTransaction
from pydantic import UUID4

from app.db import DatabaseManager
from app.models.comment import Comment
from app.models.hoot import Hoot
from app.models.user import User
from app.schemas.responses import CommentResponseSchema, HootResponseSchema


class AuthorService:
    """Service that attaches author profiles to hoots and comments.

    Hoots and comments only store their author's ID. Before they are
    returned to a client the ID is replaced with the full profile, loaded
    in a single query for everything being returned.
    """

    async def get_authors(self, user_ids: Iterable[UUID4]) -> dict[UUID4, User]:
        """Load the profiles of the given users.

        Args:
            user_ids: IDs of the users to load; duplicates are fine

        Returns:
            Mapping of user ID to profile for every user that exists
        """
        unique_ids = sorted({str(user_id) for user_id in user_ids})
        if not unique_ids:
            return {}

        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._get_authors, unique_ids)

    def _get_authors(
        self, tx: ManagedTransaction, user_ids: list[str]
    ) -> dict[UUID4, User]:
        query = """
        MATCH (user:User)
        WHERE user.user_id IN $user_ids
        RETURN user
        """
        result = tx.run(query, user_ids=user_ids)
        users = [User(**dict(record["user"])) for record in result]
        return {user.user_id: user for user in users}

    async def _resolve(
        self, user_ids: Iterable[UUID4], known: Iterable[User]
    ) -> dict[UUID4, User]:
        authors = {user.user_id: user for user in known}
        missing = [user_id for user_id in user_ids if user_id not in authors]
        if missing:
            authors.update(await self.get_authors(missing))
        return authors

    def _comment_response(
        self, comment: Comment, authors: dict[UUID4, User]
    ) -> CommentResponseSchema:
        return CommentResponseSchema(
            comment_id=comment.comment_id,
            author=authors.get(comment.author_id),
            text=comment.text,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )

    def _hoot_response(
        self, hoot: Hoot, authors: dict[UUID4, User]
    ) -> HootResponseSchema:
        return HootResponseSchema(
            hoot_id=hoot.hoot_id,
            author=authors.get(hoot.author_id),
            title=hoot.title,
            text=hoot.text,
            category=hoot.category,
            comments=[self._comment_response(c, authors) for c in hoot.comments],
            created_at=hoot.created_at,
            updated_at=hoot.updated_at,
        )

    async def present_hoots(
        self, hoots: list[Hoot], known: Iterable[User] = ()
    ) -> list[HootResponseSchema]:
        """Replace author IDs with profiles on hoots and their comments.

        Args:
            hoots: The hoots to present
            known: Profiles already at hand, usually the requesting user;
                these are not looked up again

        Returns:
            The hoots in the same order with author profiles attached
        """
        user_ids = [hoot.author_id for hoot in hoots]
        user_ids += [c.author_id for hoot in hoots for c in hoot.comments]
        authors = await self._resolve(user_ids, known)
        return [self._hoot_response(hoot, authors) for hoot in hoots]

    async def present_hoot(
        self, hoot: Hoot, known: Iterable[User] = ()
    ) -> HootResponseSchema:
        [response] = await self.present_hoots([hoot], known)
        return response

    async def present_comment(
        self, comment: Comment, known: Iterable[User] = ()
    ) -> CommentResponseSchema:
        authors = await self._resolve([comment.author_id], known)
        return self._comment_response(comment, authors)
