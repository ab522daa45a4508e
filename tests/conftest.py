import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import pytest
from pydantic import UUID4

from app.models.comment import Comment
from app.models.hoot import Hoot, HootCategory
from app.models.user import User
from app.repositories.hoot import HootStore
from app.services.author import AuthorService
from app.services.comment import CommentService
from app.services.hoot import HootService


class InMemoryHootStore(HootStore):
    """Hoot store held in a dict, for service tests.

    Each operation yields to the event loop once before touching state, as
    a network round trip would, but the state change itself never spans an
    await.
    """

    def __init__(self) -> None:
        self.hoots: dict[UUID4, Hoot] = {}

    async def create(self, hoot: Hoot) -> Hoot:
        await asyncio.sleep(0)
        self.hoots[hoot.hoot_id] = hoot
        return hoot

    async def find_all(self) -> list[Hoot]:
        await asyncio.sleep(0)
        return sorted(self.hoots.values(), key=lambda h: h.created_at, reverse=True)

    async def find_by_id(self, hoot_id: UUID4) -> Hoot | None:
        await asyncio.sleep(0)
        return self.hoots.get(hoot_id)

    async def update(self, hoot_id: UUID4, changes: dict[str, Any]) -> Hoot | None:
        await asyncio.sleep(0)
        if hoot_id not in self.hoots:
            return None
        self.hoots[hoot_id] = self.hoots[hoot_id].model_copy(update=changes)
        return self.hoots[hoot_id]

    async def delete(self, hoot_id: UUID4) -> bool:
        await asyncio.sleep(0)
        return self.hoots.pop(hoot_id, None) is not None

    async def append_comment(self, hoot_id: UUID4, comment: Comment) -> Comment | None:
        await asyncio.sleep(0)
        if hoot_id not in self.hoots:
            return None
        hoot = self.hoots[hoot_id]
        self.hoots[hoot_id] = hoot.model_copy(
            update={"comments": [*hoot.comments, comment]}
        )
        return comment

    async def update_comment(
        self, hoot_id: UUID4, comment_id: UUID4, text: str, updated_at: datetime
    ) -> Comment | None:
        await asyncio.sleep(0)
        hoot = self.hoots.get(hoot_id)
        if hoot is None or hoot.find_comment(comment_id) is None:
            return None
        comments = [
            c.model_copy(update={"text": text, "updated_at": updated_at})
            if c.comment_id == comment_id
            else c
            for c in hoot.comments
        ]
        self.hoots[hoot_id] = hoot.model_copy(update={"comments": comments})
        return self.hoots[hoot_id].find_comment(comment_id)

    async def remove_comment(self, hoot_id: UUID4, comment_id: UUID4) -> bool:
        await asyncio.sleep(0)
        hoot = self.hoots.get(hoot_id)
        if hoot is None or hoot.find_comment(comment_id) is None:
            return False
        comments = [c for c in hoot.comments if c.comment_id != comment_id]
        self.hoots[hoot_id] = hoot.model_copy(update={"comments": comments})
        return True


# Store and service fixtures
@pytest.fixture
def hoot_store() -> InMemoryHootStore:
    return InMemoryHootStore()


@pytest.fixture
def hoot_service(hoot_store: InMemoryHootStore) -> HootService:
    return HootService(store=hoot_store)


@pytest.fixture
def comment_service(hoot_store: InMemoryHootStore) -> CommentService:
    return CommentService(store=hoot_store)


@pytest.fixture
def author_service() -> AuthorService:
    return AuthorService()


# Test data fixtures
@pytest.fixture
def test_user() -> User:
    return User(
        user_id=uuid4(),
        username="test_user",
        display_name="Test User",
        bio="Test user bio",
        created_at=datetime.now(UTC),
    )


@pytest.fixture
def another_test_user() -> User:
    return User(
        user_id=uuid4(),
        username="another_test_user",
        display_name="Another Test User",
        created_at=datetime.now(UTC),
    )


def make_hoot(
    author: User,
    title: str = "Test hoot",
    created_at: datetime | None = None,
    comments: list[Comment] | None = None,
) -> Hoot:
    created_at = created_at or datetime.now(UTC)
    return Hoot(
        hoot_id=uuid4(),
        author_id=author.user_id,
        title=title,
        text="Test hoot text",
        category=HootCategory.NEWS,
        comments=comments or [],
        created_at=created_at,
        updated_at=created_at,
    )


def make_comment(author: User, text: str = "Test comment") -> Comment:
    current_time = datetime.now(UTC)
    return Comment(
        comment_id=uuid4(),
        author_id=author.user_id,
        text=text,
        created_at=current_time,
        updated_at=current_time,
    )


@pytest.fixture
def test_hoot(hoot_store: InMemoryHootStore, test_user: User) -> Hoot:
    hoot = make_hoot(test_user, created_at=datetime.now(UTC) - timedelta(hours=1))
    hoot_store.hoots[hoot.hoot_id] = hoot
    return hoot


@pytest.fixture
def hoot_factory():
    return make_hoot


@pytest.fixture
def comment_factory():
    return make_comment
