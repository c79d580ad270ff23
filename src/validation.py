"""Data-quality checks for a tree snapshot before layout."""

import networkx as nx

from graph import index_members
from models import Member, Relationship, SpouseRelationship


def validate_snapshot(
    members: list[Member],
    relationships: list[Relationship],
    spouse_relationships: list[SpouseRelationship],
) -> list[str]:
    """
    Validate a tree snapshot for:
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent, parent younger than 12)
    - Death before birth
    - Members with more than one spouse edge (only the first is drawn)
    - Relationships referencing members that do not exist

    Layout tolerates all of these; the warnings explain why a drawn tree may
    look different from the stored rows. Returns a list of warning messages.
    """
    warnings: list[str] = []
    by_id = index_members(members)

    def name_of(member_id: str) -> str:
        member = by_id.get(member_id)
        return member.full_name if member else member_id

    # Dangling references
    for rel in relationships:
        missing = [i for i in (rel.parent_id, rel.child_id) if i not in by_id]
        if missing:
            warnings.append(f"Parent edge {rel.parent_id} -> {rel.child_id} references unknown member(s) {missing}")
    for rel in spouse_relationships:
        missing = [i for i in (rel.member1_id, rel.member2_id) if i not in by_id]
        if missing:
            warnings.append(f"Spouse edge {rel.member1_id} - {rel.member2_id} references unknown member(s) {missing}")

    # Cycle detection over known members only
    parent_edges = [
        (r.parent_id, r.child_id) for r in relationships if r.parent_id in by_id and r.child_id in by_id
    ]
    parent_graph = nx.DiGraph(parent_edges)
    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_names = [name_of(edge[0]) for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_names}")
    except nx.NetworkXNoCycle:
        pass

    # ISO dates compare as strings
    for parent_id, child_id in parent_graph.edges():
        parent_birth = by_id[parent_id].birth_date
        child_birth = by_id[child_id].birth_date
        if not (parent_birth and child_birth):
            continue
        if child_birth < parent_birth:
            warnings.append(f"Impossible: {name_of(child_id)} born before parent {name_of(parent_id)}")
        else:
            try:
                if int(child_birth[:4]) - int(parent_birth[:4]) < 12:
                    warnings.append(
                        f"Suspicious: {name_of(parent_id)} was less than 12 years "
                        f"old when {name_of(child_id)} was born"
                    )
            except ValueError:
                pass

    for member in by_id.values():
        if member.birth_date and member.death_date and member.death_date < member.birth_date:
            warnings.append(f"Impossible: {member.full_name} died before being born")

    # Only the first spouse edge of a member is drawn
    spouse_counts: dict[str, int] = {}
    for rel in spouse_relationships:
        if rel.member1_id == rel.member2_id:
            continue
        for member_id in (rel.member1_id, rel.member2_id):
            spouse_counts[member_id] = spouse_counts.get(member_id, 0) + 1
    for member_id, count in spouse_counts.items():
        if count > 1 and member_id in by_id:
            warnings.append(
                f"{name_of(member_id)} appears in {count} spouse relationships; only the first is shown"
            )

    return warnings
