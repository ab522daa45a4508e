from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any

from neo4j import ManagedTransaction, Record
from pydantic import UUID4

from app.db import DatabaseManager
from app.models.comment import Comment
from app.models.hoot import Hoot

# Appended to any query that has bound `hoot`; yields one row per hoot with
# its comments in insertion order.
AGGREGATE_RETURN = """
WITH hoot
OPTIONAL MATCH (comment:Comment)-[:ON_HOOT]->(hoot)
WITH hoot, comment
ORDER BY comment.position
WITH hoot, collect(comment) AS comments
RETURN hoot, comments
"""


class HootStore(ABC):
    """Persistence interface for hoot aggregates.

    Implementations own the hoot together with its embedded comments. The
    comment append must be a single atomic write so that concurrent
    appends to the same hoot never overwrite each other.
    """

    @abstractmethod
    async def create(self, hoot: Hoot) -> Hoot:
        """Persist a new hoot and return it as stored."""
        pass

    @abstractmethod
    async def find_all(self) -> list[Hoot]:
        """Return every hoot, newest first."""
        pass

    @abstractmethod
    async def find_by_id(self, hoot_id: UUID4) -> Hoot | None:
        """Return the hoot with its comments, or None if it does not exist."""
        pass

    @abstractmethod
    async def update(self, hoot_id: UUID4, changes: dict[str, Any]) -> Hoot | None:
        """Apply field changes to a hoot and return the updated aggregate.

        Returns:
            The updated hoot, or None if it does not exist
        """
        pass

    @abstractmethod
    async def delete(self, hoot_id: UUID4) -> bool:
        """Delete a hoot and all of its comments.

        Returns:
            True if a hoot was deleted
        """
        pass

    @abstractmethod
    async def append_comment(self, hoot_id: UUID4, comment: Comment) -> Comment | None:
        """Atomically append a comment to the end of a hoot's comments.

        Returns:
            The stored comment, or None if the hoot does not exist
        """
        pass

    @abstractmethod
    async def update_comment(
        self, hoot_id: UUID4, comment_id: UUID4, text: str, updated_at: datetime
    ) -> Comment | None:
        """Replace the text of one comment.

        Returns:
            The updated comment, or None if it is not on that hoot
        """
        pass

    @abstractmethod
    async def remove_comment(self, hoot_id: UUID4, comment_id: UUID4) -> bool:
        """Remove one comment, leaving the order of the rest unchanged.

        Returns:
            True if the comment was removed
        """
        pass


class Neo4jHootStore(HootStore):
    """Hoot store backed by Neo4j.

    Graph layout::

        (:User)-[:POSTED]->(:Hoot)<-[:ON_HOOT]-(:Comment)<-[:AUTHORED]-(:User)

    Comment order comes from a per-hoot counter, ``comment_seq``, that is
    incremented in the same statement that creates the comment. Writing the
    counter locks the hoot node, which serialises concurrent appends.
    """

    def _to_hoot(self, record: Record) -> Hoot:
        comments = [Comment(**dict(node)) for node in record["comments"]]
        return Hoot(**dict(record["hoot"]), comments=comments)

    def _hoot_properties(self, hoot: Hoot) -> dict[str, Any]:
        return {
            "hoot_id": str(hoot.hoot_id),
            "author_id": str(hoot.author_id),
            "title": hoot.title,
            "text": hoot.text,
            "category": hoot.category.value,
            "created_at": hoot.created_at.isoformat(),
            "updated_at": hoot.updated_at.isoformat(),
        }

    def _change_properties(self, changes: dict[str, Any]) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        for key, value in changes.items():
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, Enum):
                value = value.value
            properties[key] = value
        return properties

    async def create(self, hoot: Hoot) -> Hoot:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(self._create_hoot, hoot)

    def _create_hoot(self, tx: ManagedTransaction, hoot: Hoot) -> Hoot:
        query = """
        MATCH (author:User {user_id: $author_id})
        CREATE (hoot:Hoot)
        SET hoot = $properties, hoot.comment_seq = 0
        CREATE (author)-[:POSTED {created_at: $properties.created_at}]->(hoot)
        RETURN hoot, [] AS comments
        """
        result = tx.run(
            query,
            author_id=str(hoot.author_id),
            properties=self._hoot_properties(hoot),
        )
        if record := result.single():
            return self._to_hoot(record)
        raise ValueError(f"Author {hoot.author_id} does not exist")

    async def find_all(self) -> list[Hoot]:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._find_all)

    def _find_all(self, tx: ManagedTransaction) -> list[Hoot]:
        query = (
            "MATCH (hoot:Hoot)"
            + AGGREGATE_RETURN
            + "ORDER BY hoot.created_at DESC"
        )
        result = tx.run(query)
        return [self._to_hoot(record) for record in result]

    async def find_by_id(self, hoot_id: UUID4) -> Hoot | None:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_read(self._find_by_id, hoot_id)

    def _find_by_id(self, tx: ManagedTransaction, hoot_id: UUID4) -> Hoot | None:
        query = "MATCH (hoot:Hoot {hoot_id: $hoot_id})" + AGGREGATE_RETURN
        result = tx.run(query, hoot_id=str(hoot_id))
        if record := result.single():
            return self._to_hoot(record)
        return None

    async def update(self, hoot_id: UUID4, changes: dict[str, Any]) -> Hoot | None:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(self._update_hoot, hoot_id, changes)

    def _update_hoot(
        self, tx: ManagedTransaction, hoot_id: UUID4, changes: dict[str, Any]
    ) -> Hoot | None:
        query = (
            """
            MATCH (hoot:Hoot {hoot_id: $hoot_id})
            SET hoot += $changes
            """
            + AGGREGATE_RETURN
        )
        result = tx.run(
            query,
            hoot_id=str(hoot_id),
            changes=self._change_properties(changes),
        )
        if record := result.single():
            return self._to_hoot(record)
        return None

    async def delete(self, hoot_id: UUID4) -> bool:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(self._delete_hoot, hoot_id)

    def _delete_hoot(self, tx: ManagedTransaction, hoot_id: UUID4) -> bool:
        query = """
        MATCH (hoot:Hoot {hoot_id: $hoot_id})
        OPTIONAL MATCH (comment:Comment)-[:ON_HOOT]->(hoot)
        WITH hoot, collect(comment) AS comments
        FOREACH (c IN comments | DETACH DELETE c)
        DETACH DELETE hoot
        """
        result = tx.run(query, hoot_id=str(hoot_id))
        return result.consume().counters.nodes_deleted > 0

    async def append_comment(self, hoot_id: UUID4, comment: Comment) -> Comment | None:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(self._append_comment, hoot_id, comment)

    def _append_comment(
        self, tx: ManagedTransaction, hoot_id: UUID4, comment: Comment
    ) -> Comment | None:
        query = """
        MATCH (hoot:Hoot {hoot_id: $hoot_id})
        OPTIONAL MATCH (author:User {user_id: $author_id})
        SET hoot.comment_seq = coalesce(hoot.comment_seq, 0) + 1
        CREATE (comment:Comment {
            comment_id: $comment_id,
            author_id: $author_id,
            text: $text,
            created_at: $created_at,
            updated_at: $updated_at,
            position: hoot.comment_seq
        })
        CREATE (comment)-[:ON_HOOT]->(hoot)
        FOREACH (a IN CASE WHEN author IS NULL THEN [] ELSE [author] END |
            CREATE (a)-[:AUTHORED]->(comment)
        )
        RETURN comment
        """
        result = tx.run(
            query,
            hoot_id=str(hoot_id),
            comment_id=str(comment.comment_id),
            author_id=str(comment.author_id),
            text=comment.text,
            created_at=comment.created_at.isoformat(),
            updated_at=comment.updated_at.isoformat(),
        )
        if record := result.single():
            return Comment(**dict(record["comment"]))
        return None

    async def update_comment(
        self, hoot_id: UUID4, comment_id: UUID4, text: str, updated_at: datetime
    ) -> Comment | None:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(
                self._update_comment, hoot_id, comment_id, text, updated_at
            )

    def _update_comment(
        self,
        tx: ManagedTransaction,
        hoot_id: UUID4,
        comment_id: UUID4,
        text: str,
        updated_at: datetime,
    ) -> Comment | None:
        query = """
        MATCH (comment:Comment {comment_id: $comment_id})
              -[:ON_HOOT]->(:Hoot {hoot_id: $hoot_id})
        SET comment.text = $text,
            comment.updated_at = $updated_at
        RETURN comment
        """
        result = tx.run(
            query,
            hoot_id=str(hoot_id),
            comment_id=str(comment_id),
            text=text,
            updated_at=updated_at.isoformat(),
        )
        if record := result.single():
            return Comment(**dict(record["comment"]))
        return None

    async def remove_comment(self, hoot_id: UUID4, comment_id: UUID4) -> bool:
        db_manager = DatabaseManager()
        with db_manager.driver.session(database=db_manager.database) as session:
            return session.execute_write(self._remove_comment, hoot_id, comment_id)

    def _remove_comment(
        self, tx: ManagedTransaction, hoot_id: UUID4, comment_id: UUID4
    ) -> bool:
        query = """
        MATCH (comment:Comment {comment_id: $comment_id})
              -[:ON_HOOT]->(:Hoot {hoot_id: $hoot_id})
        DETACH DELETE comment
        """
        result = tx.run(query, hoot_id=str(hoot_id), comment_id=str(comment_id))
        return result.consume().counters.nodes_deleted > 0
