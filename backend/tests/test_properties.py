"""
Property-based tests for the cascade engine with Hypothesis.

Random comment forests are built in a private in-memory database per example
(function-scoped fixtures are not reset between Hypothesis examples).
"""

from contextlib import contextmanager

from hypothesis import HealthCheck, given, settings, strategies as st
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from crud_api.models import Base, Comment
from crud_api.services.cascade import CascadeService
from crud_api.services.repository import EntityRepository

TOMBSTONE = {"is_deleted": True, "updated_by": 1}


@contextmanager
def fresh_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = Session(engine)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def build_forest(session: Session, parents: list[int]) -> list[int]:
    """
    Insert one comment per entry. Entry i replies to comment `parents[i]`
    when that index is smaller than i, otherwise it starts a new thread.
    """
    ids: list[int] = []
    for index, parent in enumerate(parents):
        parent_id = ids[parent] if 0 <= parent < index else None
        comment = Comment(comment=f"c{index}", parent_item=parent_id)
        session.add(comment)
        session.flush()
        ids.append(comment.id)
    session.commit()
    return ids


def descendants(parents: list[int], root: int) -> set[int]:
    """Indices of every comment below `root`."""
    children: dict[int, list[int]] = {}
    for index, parent in enumerate(parents):
        if 0 <= parent < index:
            children.setdefault(parent, []).append(index)

    found: set[int] = set()
    stack = [root]
    while stack:
        for child in children.get(stack.pop(), []):
            if child not in found:
                found.add(child)
                stack.append(child)
    return found


forests = st.lists(st.integers(min_value=-1, max_value=25), min_size=1, max_size=25)


class TestCascadeProperties:
    """Properties that hold for any comment forest."""

    @given(parents=forests, pick=st.integers(min_value=0, max_value=1000))
    @settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_count_matches_descendants(self, parents, pick):
        root = pick % len(parents)
        with fresh_session() as session:
            ids = build_forest(session, parents)
            result = CascadeService(session).count("Comment", {"id": ids[root]})

        assert result.found is True
        assert result.counts == {"Comment": len(descendants(parents, root))}

    @given(parents=forests, pick=st.integers(min_value=0, max_value=1000))
    @settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_count_does_not_mutate(self, parents, pick):
        root = pick % len(parents)
        with fresh_session() as session:
            ids = build_forest(session, parents)
            repo = EntityRepository(Comment, session)
            CascadeService(session).count("Comment", {"id": ids[root]})

            assert repo.count() == len(parents)
            assert repo.count({"is_deleted": True}) == 0

    @given(parents=forests, pick=st.integers(min_value=0, max_value=1000))
    @settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_operations_visit_the_same_entities(self, parents, pick):
        root = pick % len(parents)
        with fresh_session() as session:
            ids = build_forest(session, parents)
            service = CascadeService(session)

            counted = service.count("Comment", {"id": ids[root]})
            soft = service.soft_delete("Comment", {"id": ids[root]}, TOMBSTONE)
            hard = service.hard_delete("Comment", {"id": ids[root]})

        assert counted.trace == soft.trace == hard.trace
        assert soft.counts == hard.counts

    @given(parents=forests, pick=st.integers(min_value=0, max_value=1000))
    @settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_hard_delete_removes_exactly_the_subtree(self, parents, pick):
        root = pick % len(parents)
        expected = descendants(parents, root) | {root}
        with fresh_session() as session:
            ids = build_forest(session, parents)
            result = CascadeService(session).hard_delete("Comment", {"id": ids[root]})
            remaining = set(EntityRepository(Comment, session).find_identifiers({}))

        assert result.counts == {"Comment": len(expected)}
        assert remaining == {ids[i] for i in range(len(parents)) if i not in expected}

    @given(parents=forests, pick=st.integers(min_value=0, max_value=1000))
    @settings(max_examples=30, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_soft_delete_flags_exactly_the_subtree(self, parents, pick):
        root = pick % len(parents)
        expected = descendants(parents, root) | {root}
        with fresh_session() as session:
            ids = build_forest(session, parents)
            CascadeService(session).soft_delete("Comment", {"id": ids[root]}, TOMBSTONE)
            flagged = set(EntityRepository(Comment, session).find_identifiers({"is_deleted": True}))

        assert flagged == {ids[i] for i in expected}
