"""Combined view of two family trees joined through a marriage between their members."""

import logging

from models import FamilyTree, LinkedTree, Member, SpouseRelationship, TreeSnapshot

logger = logging.getLogger(__name__)


def link_spouse_relationship(linked: LinkedTree) -> SpouseRelationship:
    """The spouse edge implied by a tree link."""
    return SpouseRelationship(
        id=f"link-{linked.id}",
        tree_id=linked.tree1_id,
        member1_id=linked.link_member1_id,
        member2_id=linked.link_member2_id,
        relationship_type="married",
    )


def with_link_edge(
    spouse_relationships: list[SpouseRelationship], linked: LinkedTree
) -> list[SpouseRelationship]:
    """
    Return the spouse edges plus the link edge, unless the two link members are
    already married in the fetched rows (in either member order).
    """
    link = link_spouse_relationship(linked)
    combined = list(spouse_relationships)
    if any(rel.pair == link.pair for rel in combined):
        logger.debug("Link %s already present as a spouse edge", linked.id)
        return combined
    combined.append(link)
    return combined


def combine_snapshots(first: TreeSnapshot, second: TreeSnapshot, linked: LinkedTree) -> TreeSnapshot:
    """Union of two trees' rows, with the link edge joining them."""
    return TreeSnapshot(
        members=first.members + second.members,
        relationships=first.relationships + second.relationships,
        spouse_relationships=with_link_edge(
            first.spouse_relationships + second.spouse_relationships, linked
        ),
    )


def origin_tree(member: Member, trees: list[FamilyTree]) -> FamilyTree | None:
    """The tree a member of a combined view belongs to."""
    for tree in trees:
        if tree.id == member.tree_id:
            return tree
    return None
