"""Rebuild a rooted family tree from flat member and relationship rows."""

import logging

import networkx as nx

from models import Member, Relationship, SpouseRelationship, TreeNode

logger = logging.getLogger(__name__)


def index_members(members: list[Member]) -> dict[str, Member]:
    """Map member id to member; the first row wins if an id repeats."""
    by_id: dict[str, Member] = {}
    for member in members:
        by_id.setdefault(member.id, member)
    return by_id


def parent_child_graph(members: list[Member], relationships: list[Relationship]) -> nx.DiGraph:
    """
    Build a directed parent -> child graph over the known members.

    Successor order follows the first time each edge was seen, and a repeated
    (parent, child) pair collapses into a single edge. Edges that reference an
    unknown member, or point a member at itself, are dropped.
    """
    G = nx.DiGraph()
    for member_id, member in index_members(members).items():
        G.add_node(member_id, member=member)

    for rel in relationships:
        if rel.parent_id not in G or rel.child_id not in G:
            logger.debug("Dropping dangling parent edge %s -> %s", rel.parent_id, rel.child_id)
            continue
        if rel.parent_id == rel.child_id:
            logger.debug("Dropping self-referencing parent edge on %s", rel.parent_id)
            continue
        G.add_edge(rel.parent_id, rel.child_id, relationship_type=rel.relationship_type)

    return G


def children_of(G: nx.DiGraph, member_id: str) -> list[str]:
    """Ordered child ids of a member, or an empty list for unknown ids."""
    if member_id not in G:
        return []
    return list(G.successors(member_id))


def find_root(members: list[Member]) -> Member | None:
    """The member flagged as root, else the first member; None for an empty tree."""
    if not members:
        return None
    for member in members:
        if member.is_root:
            return member
    return members[0]


def _spouse_edges_by_member(
    spouse_relationships: list[SpouseRelationship],
) -> dict[str, list[int]]:
    # Edge indices per member, in input order
    by_member: dict[str, list[int]] = {}
    for index, rel in enumerate(spouse_relationships):
        if rel.member1_id == rel.member2_id:
            continue
        by_member.setdefault(rel.member1_id, []).append(index)
        by_member.setdefault(rel.member2_id, []).append(index)
    return by_member


def _claim_spouse(
    member_id: str,
    spouse_relationships: list[SpouseRelationship],
    edges_by_member: dict[str, list[int]],
    members_by_id: dict[str, Member],
    placed: set[str],
    processed: set[int],
) -> Member | None:
    """Take the first unprocessed spouse edge of a member whose partner can still be placed."""
    for index in edges_by_member.get(member_id, []):
        if index in processed:
            continue
        partner_id = spouse_relationships[index].partner_of(member_id)
        partner = members_by_id.get(partner_id)
        if partner is None:
            logger.debug("Ignoring spouse edge of %s to unknown member %s", member_id, partner_id)
            continue
        if partner_id in placed:
            logger.debug("Ignoring spouse edge %s - %s: partner already placed", member_id, partner_id)
            continue
        processed.add(index)
        return partner
    return None


def build_tree(
    members: list[Member],
    relationships: list[Relationship],
    spouse_relationships: list[SpouseRelationship],
) -> TreeNode | None:
    """
    Reconstruct the rooted tree that the layout engine positions.

    Starting from the root member, each member is visited depth-first. A member
    takes at most one spouse (the first unprocessed spouse edge that touches it),
    and the spouse's own children are folded in after the member's children.
    Every member id is placed at most once per pass, either as a node or as a
    spouse, so children reachable through a second parent and edges that loop
    back to an ancestor are skipped rather than drawn twice.

    Args:
        members: Members in input order; the order decides the fallback root
        relationships: Parent -> child edges
        spouse_relationships: Spouse edges, first match wins

    Returns:
        The root TreeNode, or None when there are no members
    """
    root = find_root(members)
    if root is None:
        return None

    members_by_id = index_members(members)
    # A duplicated root id resolves to the first row, like every other lookup
    root = members_by_id[root.id]
    G = parent_child_graph(members, relationships)
    edges_by_member = _spouse_edges_by_member(spouse_relationships)
    placed: set[str] = set()
    processed: set[int] = set()

    def build_node(member_id: str, level: int) -> TreeNode | None:
        member = members_by_id.get(member_id)
        if member is None:
            return None
        if member_id in placed:
            logger.debug("Skipping %s at level %d: already placed", member_id, level)
            return None
        placed.add(member_id)

        spouse = _claim_spouse(
            member_id, spouse_relationships, edges_by_member, members_by_id, placed, processed
        )
        child_ids = children_of(G, member_id)
        if spouse is not None:
            placed.add(spouse.id)
            child_ids += [c for c in children_of(G, spouse.id) if c not in child_ids]

        children = []
        for child_id in child_ids:
            child = build_node(child_id, level + 1)
            if child is not None:
                children.append(child)

        return TreeNode(member=member, children=children, spouse=spouse, level=level)

    return build_node(root.id, 0)
