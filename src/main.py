"""
Command-line entry point.

1) import-gedcom: read a GEDCOM file into the SQLite tree store.
2) link: join two stored trees through a marriage between their members.
3) validate: report data-quality warnings for a stored tree.
4) render: rebuild, lay out and draw a stored tree or a linked view.
"""

from pathlib import Path
import argparse
import logging
import sys

from config import LayoutConfig
from database import create_database, load_linked_tree, load_tree, store_linked_tree, store_tree
from layout import build_diagram
from models import FamilyTree, LinkedTree, TreeSnapshot
from parsing import normalize_data, parse_gedcom
from plotting import plot_diagram, write_dot
from validation import validate_snapshot

logger = logging.getLogger(__name__)


def print_warnings(warnings: list[str], limit: int = 10):
    if not warnings:
        print("  No validation issues found")
        return
    print(f"  Found {len(warnings)} validation warnings:")
    for w in warnings[:limit]:
        print(f"    - {w}")
    if len(warnings) > limit:
        print(f"    ... and {len(warnings) - limit} more")


def load_snapshot(args) -> TreeSnapshot:
    conn = create_database(args.db)
    try:
        if args.linked:
            print(f"Loading linked view {args.linked} from {args.db}")
            return load_linked_tree(conn, args.linked)
        print(f"Loading tree {args.tree} from {args.db}")
        return load_tree(conn, args.tree)
    finally:
        conn.close()


def cmd_import_gedcom(args) -> int:
    print(f"Parsing GEDCOM file: {args.gedcom}")
    reader = parse_gedcom(args.gedcom)

    print("Normalizing data...")
    # Stored ids are prefixed with the tree id, e.g. smith:I1
    snapshot = normalize_data(reader, tree_id=args.tree, root_id=args.root, id_prefix=f"{args.tree}:")
    print(
        f"  Found {len(snapshot.members)} members, {len(snapshot.relationships)} parent edges "
        f"and {len(snapshot.spouse_relationships)} spouse edges"
    )

    print(f"Storing data in SQLite: {args.db}")
    conn = create_database(args.db)
    try:
        tree = FamilyTree(id=args.tree, name=args.name or args.gedcom.stem)
        store_tree(conn, tree, snapshot.members, snapshot.relationships, snapshot.spouse_relationships)
    finally:
        conn.close()

    print("Validating tree...")
    print_warnings(validate_snapshot(snapshot.members, snapshot.relationships, snapshot.spouse_relationships))
    return 0


def cmd_link(args) -> int:
    conn = create_database(args.db)
    try:
        for tree_id, member_id in ((args.tree1, args.member1), (args.tree2, args.member2)):
            snapshot = load_tree(conn, tree_id)
            if not any(m.id == member_id for m in snapshot.members):
                raise LookupError(f"Member {member_id} not found in tree {tree_id}")

        linked = LinkedTree(
            id=args.id,
            name=args.name or f"{args.tree1} + {args.tree2}",
            tree1_id=args.tree1,
            tree2_id=args.tree2,
            link_member1_id=args.member1,
            link_member2_id=args.member2,
        )
        store_linked_tree(conn, linked)
    finally:
        conn.close()

    print(f"Linked {args.tree1} and {args.tree2} as {linked.id}")
    return 0


def cmd_validate(args) -> int:
    snapshot = load_snapshot(args)
    print("Validating tree...")
    warnings = validate_snapshot(snapshot.members, snapshot.relationships, snapshot.spouse_relationships)
    print_warnings(warnings, limit=args.limit)
    return 1 if warnings and args.strict else 0


def cmd_render(args) -> int:
    snapshot = load_snapshot(args)
    config = LayoutConfig(
        node_width=args.node_width,
        node_height=args.node_height,
        horizontal_gap=args.horizontal_gap,
        vertical_gap=args.vertical_gap,
        spouse_gap=args.spouse_gap,
    )

    print("Building layout...")
    diagram = build_diagram(
        snapshot.members, snapshot.relationships, snapshot.spouse_relationships, config
    )
    if diagram.is_empty:
        print("  Tree has no members")
    else:
        print(f"  Placed {len(diagram.positions)} of {len(snapshot.members)} members")

    dot_output = args.out is not None and args.out.suffix.lower() in (".dot", ".gv")
    if args.graphviz or dot_output:
        if args.out is None:
            print("--graphviz needs --out", file=sys.stderr)
            return 2
        write_dot(diagram, args.out, zoom=args.zoom)
    else:
        plot_diagram(diagram, args.out, zoom=args.zoom)
    return 0


def add_source_args(parser: argparse.ArgumentParser):
    parser.add_argument("--db", type=Path, default=Path("family_tree.db"), help="SQLite tree store")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--tree", help="Tree id")
    source.add_argument("--linked", help="Linked tree id (combined view of two trees)")


def build_parser() -> argparse.ArgumentParser:
    defaults = LayoutConfig()
    parser = argparse.ArgumentParser(prog="famtree", description="Family tree layout and rendering")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_import = subparsers.add_parser("import-gedcom", help="Import a GEDCOM file as a tree")
    p_import.add_argument("gedcom", type=Path)
    p_import.add_argument("--db", type=Path, default=Path("family_tree.db"))
    p_import.add_argument("--tree", required=True, help="Id for the imported tree")
    p_import.add_argument("--name", help="Tree name (defaults to the file name)")
    p_import.add_argument("--root", help="GEDCOM id of the root member, e.g. I1")
    p_import.set_defaults(func=cmd_import_gedcom)

    p_link = subparsers.add_parser("link", help="Link two trees through a marriage")
    p_link.add_argument("--db", type=Path, default=Path("family_tree.db"))
    p_link.add_argument("--id", required=True, help="Id for the linked view")
    p_link.add_argument("--name", help="Name of the linked view")
    p_link.add_argument("--tree1", required=True)
    p_link.add_argument("--tree2", required=True)
    p_link.add_argument("--member1", required=True, help="Member of tree1, e.g. smith:I1")
    p_link.add_argument("--member2", required=True, help="Member of tree2, e.g. jones:I2")
    p_link.set_defaults(func=cmd_link)

    p_validate = subparsers.add_parser("validate", help="Report data-quality warnings")
    add_source_args(p_validate)
    p_validate.add_argument("--limit", type=int, default=10)
    p_validate.add_argument("--strict", action="store_true", help="Exit 1 when warnings are found")
    p_validate.set_defaults(func=cmd_validate)

    p_render = subparsers.add_parser("render", help="Lay out and draw a tree")
    add_source_args(p_render)
    p_render.add_argument("--out", type=Path, help="Image or .dot file; shows a window if omitted")
    p_render.add_argument("--graphviz", action="store_true", help="Render through Graphviz neato")
    p_render.add_argument("--zoom", type=float, default=1.0)
    p_render.add_argument("--node-width", type=float, default=defaults.node_width)
    p_render.add_argument("--node-height", type=float, default=defaults.node_height)
    p_render.add_argument("--horizontal-gap", type=float, default=defaults.horizontal_gap)
    p_render.add_argument("--vertical-gap", type=float, default=defaults.vertical_gap)
    p_render.add_argument("--spouse-gap", type=float, default=defaults.spouse_gap)
    p_render.set_defaults(func=cmd_render)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except (LookupError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
