"""
Tests for the entity relationship registry.
"""

import pytest

from crud_api.models import MODEL_MAP, Comment
from crud_api.services.registry import (
    REGISTRY,
    DependentGroup,
    Edge,
    RelationshipRegistry,
    UnknownEntityError,
)


class TestRegistryTable:
    """The shipped relationship table."""

    def test_matches_models(self):
        """Every entity has a model and every edge field is a real column."""
        assert REGISTRY.validate(MODEL_MAP) == []

    def test_every_model_is_registered(self):
        assert set(REGISTRY.entities()) == set(MODEL_MAP)

    def test_chat_group_dependents(self):
        assert REGISTRY.dependents_of("Chat_group") == (
            DependentGroup("Chat_message", ("group_id",)),
        )

    def test_enterprise_dependents(self):
        sources = [group.source for group in REGISTRY.dependents_of("enterprise")]
        assert sources == ["departments", "note"]

    def test_user_edges_grouped_per_source(self):
        """All fields of one source pointing at user are OR-ed in one group."""
        groups = {g.source: g.fields for g in REGISTRY.dependents_of("user")}
        assert groups["note"] == ("provider", "added_by", "updated_by")
        assert groups["Blog"] == ("added_by", "updated_by")
        assert groups["userRole"] == ("user_id",)
        assert groups["user"] == ("added_by", "updated_by")

    def test_role_and_route_dependents(self):
        assert [g.source for g in REGISTRY.dependents_of("role")] == ["routeRole", "userRole"]
        assert REGISTRY.dependents_of("projectRoute") == (
            DependentGroup("routeRole", ("route_id",)),
        )

    @pytest.mark.parametrize("entity", ["Blog", "ToDo", "Customer", "orderItem", "Event"])
    def test_leaf_entities(self, entity):
        assert REGISTRY.has_dependents(entity) is False
        assert REGISTRY.dependents_of(entity) == ()

    @pytest.mark.parametrize("entity", ["Comment", "Master", "user"])
    def test_self_referencing_entities(self, entity):
        assert REGISTRY.is_self_referencing(entity)

    def test_chat_group_is_not_self_referencing(self):
        assert not REGISTRY.is_self_referencing("Chat_group")

    def test_describe_lists_every_edge(self):
        rows = REGISTRY.describe()
        assert ("Chat_group", "Chat_message", "group_id") in rows
        assert ("Comment", "Comment", "parent_item") in rows


class TestRegistryErrors:
    """Lookups and construction errors."""

    def test_unknown_entity(self):
        with pytest.raises(UnknownEntityError) as exc:
            REGISTRY.dependents_of("Invoice")
        assert exc.value.entity == "Invoice"
        assert "Invoice" in str(exc.value)

    def test_contains(self):
        assert "Comment" in REGISTRY
        assert "Invoice" not in REGISTRY

    def test_edge_from_unregistered_source_is_rejected(self):
        with pytest.raises(UnknownEntityError):
            RelationshipRegistry({"Comment": [Edge("Reaction", "comment_id")]})

    def test_validate_reports_bad_field(self):
        registry = RelationshipRegistry({"Comment": [Edge("Comment", "parent")]})
        problems = registry.validate({"Comment": Comment})
        assert len(problems) == 1
        assert "Comment.parent" in problems[0]

    def test_validate_reports_missing_model_and_entry(self):
        registry = RelationshipRegistry({"Comment": [], "Reaction": []})
        problems = registry.validate({"Comment": Comment, "Blog": MODEL_MAP["Blog"]})
        assert "Reaction: no model registered" in problems
        assert "Blog: model has no registry entry" in problems
