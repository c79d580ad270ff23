"""Connector line geometry between positioned family members."""

from config import DEFAULT_CONFIG, LayoutConfig
from models import LineSegment, Position, TreeNode


def connector_paths(
    root: TreeNode | None,
    positions: dict[str, Position],
    config: LayoutConfig | None = None,
) -> list[LineSegment]:
    """
    Derive the spouse links and parent -> children links for a laid-out tree.

    Segments are emitted in pre-order: for each node, the spouse link first,
    then the drop from the parent (or couple midpoint) to the connector rail,
    the rail itself (only for two or more children), a bridge from the drop
    to the rail when the drop lands outside it, and one vertical per child
    from the rail to the child's top edge. Nodes without a position are skipped.

    Args:
        root: Root of the tree returned by build_tree
        positions: Output of layout_tree for the same tree
        config: Dimensions used for the layout

    Returns:
        Flat, deterministic list of line segments
    """
    config = config or DEFAULT_CONFIG
    segments: list[LineSegment] = []
    if root is None:
        return segments

    w = config.node_width
    h = config.node_height

    for node in root.walk():
        pos = positions.get(node.id)
        if pos is None:
            continue

        if node.spouse is not None and node.spouse.id in positions:
            spouse_pos = positions[node.spouse.id]
            mid_y = pos.y + h / 2
            segments.append(LineSegment(pos.x + w, mid_y, spouse_pos.x, mid_y, "spouse"))

        child_positions = [positions[c.id] for c in node.children if c.id in positions]
        if not child_positions:
            continue

        if node.spouse is not None:
            anchor_x = pos.x + config.couple_width / 2
        else:
            anchor_x = pos.x + w / 2
        rail_y = pos.y + h + config.vertical_gap / 2
        segments.append(LineSegment(anchor_x, pos.y + h, anchor_x, rail_y, "drop"))

        centres = [p.x + w / 2 for p in child_positions]
        left, right = min(centres), max(centres)
        if len(centres) > 1:
            segments.append(LineSegment(left, rail_y, right, rail_y, "rail"))

        # A bridge joins the drop to the rail when the anchor falls outside it
        if anchor_x < left:
            segments.append(LineSegment(anchor_x, rail_y, left, rail_y, "bridge"))
        elif anchor_x > right:
            segments.append(LineSegment(right, rail_y, anchor_x, rail_y, "bridge"))

        for child_pos, centre in zip(child_positions, centres):
            segments.append(LineSegment(centre, rail_y, centre, child_pos.y, "child"))

    return segments
