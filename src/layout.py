"""Coordinate assignment for a rebuilt family tree."""

import logging

from config import DEFAULT_CONFIG, LayoutConfig
from connectors import connector_paths
from graph import build_tree
from models import Diagram, Member, Position, Relationship, SpouseRelationship, TreeNode

logger = logging.getLogger(__name__)


def couple_width(node: TreeNode, config: LayoutConfig = DEFAULT_CONFIG) -> float:
    """Width of a member's box, or of the member and spouse side by side."""
    if node.spouse is not None:
        return config.couple_width
    return config.node_width


def subtree_width(
    node: TreeNode,
    config: LayoutConfig = DEFAULT_CONFIG,
    cache: dict[str, float] | None = None,
) -> float:
    """
    Horizontal footprint of a node and all of its descendants.

    A leaf is as wide as its couple. A parent is as wide as the wider of its
    couple and its children laid side by side with `horizontal_gap` between
    them, so sibling subtrees never overlap however wide they grow.
    """
    if cache is not None and node.id in cache:
        return cache[node.id]

    width = couple_width(node, config)
    if node.children:
        children_width = sum(subtree_width(child, config, cache) for child in node.children)
        children_width += (len(node.children) - 1) * config.horizontal_gap
        width = max(width, children_width)

    if cache is not None:
        cache[node.id] = width
    return width


def layout_tree(root: TreeNode | None, config: LayoutConfig | None = None) -> dict[str, Position]:
    """
    Assign an absolute top-left position to every placed member.

    The root's subtree box starts at (0, 0). Each member (and spouse) is
    centred over its subtree box; children follow left to right one generation
    lower. Spouses are keyed by their own member id.
    """
    config = config or DEFAULT_CONFIG
    positions: dict[str, Position] = {}
    if root is None:
        return positions

    widths: dict[str, float] = {}

    def place(node: TreeNode, x: float, y: float):
        width = subtree_width(node, config, widths)
        node_x = x + (width - couple_width(node, config)) / 2
        positions[node.id] = Position(node_x, y)
        if node.spouse is not None:
            positions[node.spouse.id] = Position(node_x + config.node_width + config.spouse_gap, y)

        child_x = x
        child_y = y + config.generation_height
        for child in node.children:
            place(child, child_x, child_y)
            child_x += subtree_width(child, config, widths) + config.horizontal_gap

    place(root, 0.0, 0.0)
    logger.debug("Placed %d members", len(positions))
    return positions


def build_diagram(
    members: list[Member],
    relationships: list[Relationship],
    spouse_relationships: list[SpouseRelationship],
    config: LayoutConfig | None = None,
) -> Diagram:
    """Run build -> layout -> connector paths over one snapshot of a tree."""
    config = config or DEFAULT_CONFIG
    root = build_tree(members, relationships, spouse_relationships)
    positions = layout_tree(root, config)
    segments = connector_paths(root, positions, config)
    return Diagram(root=root, positions=positions, segments=segments, config=config)
