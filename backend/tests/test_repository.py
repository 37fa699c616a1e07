"""
Tests for the generic repository and JSON filter parsing.
"""

import pytest

from crud_api.models import Blog, Comment
from crud_api.services.repository import EntityRepository, FilterError, FindOptions


@pytest.fixture
def comments(make):
    """Five comments with upvotes 0, 5, 10, 15, 20; the last two reply to the first."""
    first = make(Comment, comment="c0", upvotes=0)
    ids = [first.id]
    for n in range(1, 5):
        parent = first.id if n >= 3 else None
        ids.append(make(Comment, comment=f"c{n}", upvotes=n * 5, parent_item=parent).id)
    return ids


@pytest.fixture
def repo(db_session):
    return EntityRepository(Comment, db_session)


class TestFilters:
    """JSON-style filters."""

    def test_equality(self, repo, comments):
        assert repo.find_identifiers({"comment": "c2"}) == [comments[2]]

    def test_list_means_in(self, repo, comments):
        assert repo.find_identifiers({"id": [comments[0], comments[4]]}) == [comments[0], comments[4]]

    def test_none_means_null(self, repo, comments):
        assert repo.find_identifiers({"parent_item": None}) == comments[:3]

    def test_comparison_operators(self, repo, comments):
        assert repo.find_identifiers({"upvotes": {"$gte": 10, "$lt": 20}}) == comments[2:4]

    def test_in_and_nin(self, repo, comments):
        assert repo.find_identifiers({"upvotes": {"$in": [0, 20]}}) == [comments[0], comments[4]]
        assert repo.count({"upvotes": {"$nin": [0, 20]}}) == 3

    def test_like_and_null_operator(self, repo, comments):
        assert repo.count({"comment": {"$like": "c%"}}) == 5
        assert repo.count({"parent_item": {"$null": False}}) == 2

    def test_or(self, repo, comments):
        query = {"$or": [{"upvotes": 0}, {"upvotes": {"$gt": 15}}]}
        assert repo.find_identifiers(query) == [comments[0], comments[4]]

    def test_empty_filter_matches_all(self, repo, comments):
        assert repo.count({}) == 5
        assert repo.count(None) == 5

    def test_unknown_field(self, repo):
        with pytest.raises(FilterError, match="colour"):
            repo.count({"colour": "red"})

    def test_unknown_operator(self, repo):
        with pytest.raises(FilterError, match=r"\$regex"):
            repo.count({"comment": {"$regex": "c.*"}})

    def test_sqlalchemy_clause_passthrough(self, repo, comments):
        assert repo.find_identifiers(Comment.upvotes > 10) == comments[3:]


class TestFindMany:
    """Listing with pagination, sort and projection."""

    def test_pagination(self, make, db_session):
        for n in range(25):
            make(Blog, title=f"post {n}")
        page = EntityRepository(Blog, db_session).find_many({}, FindOptions(page=3, limit=10))

        assert len(page.items) == 5
        assert page.total == 25
        paginator = page.to_dict()["paginator"]
        assert paginator["page_count"] == 3
        assert paginator["current_page"] == 3
        assert paginator["has_prev_page"] is True
        assert paginator["has_next_page"] is False

    def test_sort_descending(self, repo, comments):
        page = repo.find_many({}, FindOptions(sort={"upvotes": -1}))
        assert [c.id for c in page.items] == list(reversed(comments))

    def test_select_returns_dicts(self, repo, comments):
        page = repo.find_many({"id": comments[1]}, FindOptions(select=["comment"]))
        assert page.items == [{"id": comments[1], "comment": "c1"}]

    def test_without_pagination(self, repo, comments):
        page = repo.find_many({}, FindOptions(paginate=False, limit=2))
        assert len(page.items) == 5
        assert page.to_dict()["paginator"]["page_count"] == 1

    def test_limit_is_clamped(self):
        assert FindOptions(limit=10_000).limit == 200
        assert FindOptions(page=0).page == 1


class TestWrites:
    """Bulk writes report affected rows and never hide soft-deleted data."""

    def test_update_many(self, repo, db_session, comments):
        updated = repo.update_many({"upvotes": {"$gte": 10}}, {"is_deleted": True})
        db_session.commit()

        assert updated == 3
        assert repo.count({"is_deleted": True}) == 3
        # soft-deleted rows stay visible
        assert repo.find_by_id(comments[4]).is_deleted is True

    def test_update_unknown_column(self, repo):
        with pytest.raises(FilterError):
            repo.update_many({}, {"colour": "red"})

    def test_delete_many(self, repo, db_session, comments):
        deleted = repo.delete_many({"id": comments[:2]})
        db_session.commit()

        assert deleted == 2
        assert repo.count() == 3
        assert repo.find_by_id(comments[0]) is None

    def test_create_many(self, db_session):
        repo = EntityRepository(Blog, db_session)
        blogs = repo.create_many([{"title": "a"}, {"title": "b"}])
        db_session.commit()

        assert all(b.id for b in blogs)
        assert repo.count() == 2


class TestMalformedFilters:
    """Shapes a client can send that are not valid filters."""

    def test_or_requires_list(self, repo):
        with pytest.raises(FilterError, match=r"\$or"):
            repo.count({"$or": {"id": 1}})

    def test_and_requires_filters(self, repo):
        with pytest.raises(FilterError, match=r"\$and"):
            repo.count({"$and": [1, 2]})

    def test_in_requires_list(self, repo):
        with pytest.raises(FilterError, match=r"\$in"):
            repo.count({"id": {"$in": 5}})

    def test_nin_requires_list(self, repo):
        with pytest.raises(FilterError, match=r"\$nin"):
            repo.count({"id": {"$nin": "abc"}})

    def test_top_level_must_be_mapping(self, repo):
        with pytest.raises(FilterError):
            repo.count([1, 2])
