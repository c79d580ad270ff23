import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest  # noqa: E402

from models import Member, Relationship, SpouseRelationship  # noqa: E402


def member(member_id: str, **kwargs) -> Member:
    kwargs.setdefault("first_name", member_id.upper())
    return Member(id=member_id, **kwargs)


def parent(parent_id: str, child_id: str) -> Relationship:
    return Relationship(parent_id=parent_id, child_id=child_id)


def spouse(member1_id: str, member2_id: str, **kwargs) -> SpouseRelationship:
    return SpouseRelationship(member1_id=member1_id, member2_id=member2_id, **kwargs)


@pytest.fixture
def couple_family():
    """A (root) married to B; C is A's child, D is B's child."""
    members = [member("a", is_root=True, gender="male"), member("b", gender="female"), member("c"), member("d")]
    relationships = [parent("a", "c"), parent("b", "d")]
    spouse_relationships = [spouse("a", "b")]
    return members, relationships, spouse_relationships


@pytest.fixture
def wide_family():
    """Root r with children x and y; x has three children and a spouse."""
    members = [
        member("r", is_root=True),
        member("x"),
        member("xs"),
        member("y"),
        member("x1"),
        member("x2"),
        member("x3"),
    ]
    relationships = [
        parent("r", "x"),
        parent("r", "y"),
        parent("x", "x1"),
        parent("x", "x2"),
        parent("x", "x3"),
    ]
    spouse_relationships = [spouse("xs", "x")]
    return members, relationships, spouse_relationships
