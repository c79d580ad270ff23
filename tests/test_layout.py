import pytest

from conftest import member, parent

from config import LayoutConfig
from graph import build_tree
from layout import build_diagram, couple_width, layout_tree, subtree_width
from models import Position

CONFIG = LayoutConfig()
W = CONFIG.node_width
H = CONFIG.node_height
HG = CONFIG.horizontal_gap
VG = CONFIG.vertical_gap
SG = CONFIG.spouse_gap


def subtree_span(node, positions):
    """(leftmost, rightmost) x covered by the boxes of a subtree."""
    xs = []
    for n in node.walk():
        xs.append(positions[n.id].x)
        if n.spouse is not None:
            xs.append(positions[n.spouse.id].x)
    return min(xs), max(xs) + W


def test_layout_of_nothing_is_empty():
    assert layout_tree(None) == {}


def test_single_member_at_origin():
    root = build_tree([member("a", is_root=True)], [], [])
    assert layout_tree(root) == {"a": Position(0, 0)}


def test_couple_width():
    root = build_tree([member("a", is_root=True), member("b")], [], [])
    assert couple_width(root) == W
    root.spouse = member("b")
    assert couple_width(root) == 2 * W + SG


def test_spouse_children_layout(couple_family):
    root = build_tree(*couple_family)
    positions = layout_tree(root)
    assert subtree_width(root) == 2 * W + SG
    assert positions == {
        "a": Position(0, 0),
        "b": Position(W + SG, 0),
        "c": Position(0, H + VG),
        "d": Position(W + HG, H + VG),
    }


def test_parent_centred_over_children():
    members = [member("p", is_root=True), member("c1"), member("c2"), member("c3")]
    rels = [parent("p", "c1"), parent("p", "c2"), parent("p", "c3")]
    positions = layout_tree(build_tree(members, rels, []))
    children_width = 3 * W + 2 * HG
    assert positions["p"] == Position((children_width - W) / 2, 0)
    assert [positions[c].x for c in ("c1", "c2", "c3")] == [0, W + HG, 2 * (W + HG)]
    assert {positions[c].y for c in ("c1", "c2", "c3")} == {H + VG}


def test_every_member_placed_once(wide_family):
    root = build_tree(*wide_family)
    positions = layout_tree(root)
    assert set(positions) == {"r", "x", "xs", "y", "x1", "x2", "x3"}
    assert len(set(positions.values())) == len(positions)


def test_sibling_subtrees_do_not_overlap(wide_family):
    root = build_tree(*wide_family)
    positions = layout_tree(root)
    for node in root.walk():
        spans = [subtree_span(child, positions) for child in node.children]
        for (_, right), (left, _) in zip(spans, spans[1:]):
            assert right + HG <= left


def test_wide_grandchildren_push_uncle_right(wide_family):
    root = build_tree(*wide_family)
    positions = layout_tree(root)
    x_width = 3 * W + 2 * HG
    assert positions["y"].x == x_width + HG
    assert positions["x"].x == (x_width - (2 * W + SG)) / 2
    assert positions["xs"].x == positions["x"].x + W + SG


def test_custom_config():
    config = LayoutConfig(node_width=10, node_height=5, horizontal_gap=2, vertical_gap=3, spouse_gap=1)
    members = [member("p", is_root=True), member("c1"), member("c2")]
    positions = layout_tree(build_tree(members, [parent("p", "c1"), parent("p", "c2")], []), config)
    assert positions == {"p": Position(6, 0), "c1": Position(0, 8), "c2": Position(12, 8)}


def test_invalid_config_rejected():
    with pytest.raises(ValueError):
        LayoutConfig(node_width=0)


def test_build_diagram_is_idempotent(wide_family):
    first = build_diagram(*wide_family)
    second = build_diagram(*wide_family)
    assert first.positions == second.positions
    assert first.segments == second.segments


def test_empty_diagram():
    diagram = build_diagram([], [], [])
    assert diagram.is_empty
    assert diagram.positions == {}
    assert diagram.segments == []
    assert diagram.members() == []
    assert diagram.bounds() == (0.0, 0.0, 0.0, 0.0)


def test_diagram_bounds(couple_family):
    diagram = build_diagram(*couple_family)
    assert diagram.bounds() == (0, 0, 2 * W + SG, 2 * H + VG)
    assert [m.id for m in diagram.members()] == ["a", "b", "c", "d"]
