"""Rendering of laid-out family trees with matplotlib and Graphviz."""

from pathlib import Path
import logging

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from matplotlib.patches import FancyBboxPatch
import pydot

from config import MAX_ZOOM, MIN_ZOOM, ZOOM_STEP
from models import Diagram, Member

logger = logging.getLogger(__name__)

GENDER_COLORS = {"male": "lightblue", "female": "lightpink"}
DEFAULT_COLOR = "lightgray"
SELECTED_EDGE_COLOR = "goldenrod"
CONNECTOR_COLOR = "darkgray"
EMPTY_MESSAGE = "No family members yet. Start building your tree!"
POINTS_PER_INCH = 72


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


def zoom_in(zoom: float) -> float:
    return clamp_zoom(round(zoom + ZOOM_STEP, 2))


def zoom_out(zoom: float) -> float:
    return clamp_zoom(round(zoom - ZOOM_STEP, 2))


def node_color(member: Member) -> str:
    return GENDER_COLORS.get((member.gender or "").lower(), DEFAULT_COLOR)


def node_label(member: Member) -> str:
    if member.lifespan:
        return f"{member.full_name}\n{member.lifespan}"
    return member.full_name


def plot_diagram(
    diagram: Diagram,
    output_path: Path | None = None,
    zoom: float = 1.0,
    selected_member_id: str | None = None,
    on_member_click=None,
    on_member_edit=None,
    show: bool = True,
):
    """
    Draw a laid-out tree: one rounded box per member, connector lines between them.

    Every coordinate is multiplied by `zoom` (clamped to the allowed range); the
    layout itself is never rescaled. Clicking a box calls
    `on_member_click(member)`, double-clicking calls `on_member_edit(member)`.

    Args:
        diagram: Output of build_diagram
        output_path: Path to save the image (PNG, SVG, PDF). If None, displays interactively
            when `show` is true.
        zoom: Uniform scale factor
        selected_member_id: Member drawn with a highlighted border
        on_member_click: Callback taking the clicked Member
        on_member_edit: Callback taking the double-clicked Member
        show: Open an interactive window when no output path is given

    Returns:
        The matplotlib Figure
    """
    zoom = clamp_zoom(zoom)
    config = diagram.config
    w = config.node_width * zoom
    h = config.node_height * zoom

    if diagram.is_empty:
        fig, ax = plt.subplots(figsize=(8, 4))
        ax.text(0.5, 0.5, EMPTY_MESSAGE, ha="center", va="center", fontsize=12, color="gray")
        ax.axis("off")
    else:
        min_x, min_y, max_x, max_y = diagram.bounds()
        width_in = max((max_x - min_x) * zoom / 100, 4)
        height_in = max((max_y - min_y) * zoom / 100, 3)
        fig, ax = plt.subplots(figsize=(width_in, height_in))

        lines = [
            [(s.x1 * zoom, s.y1 * zoom), (s.x2 * zoom, s.y2 * zoom)] for s in diagram.segments
        ]
        ax.add_collection(LineCollection(lines, colors=CONNECTOR_COLOR, linewidths=1.5 * zoom, zorder=1))

        members_by_id: dict[str, Member] = {}
        for member in diagram.members():
            pos = diagram.positions.get(member.id)
            if pos is None:
                continue
            members_by_id[member.id] = member
            selected = member.id == selected_member_id
            box = FancyBboxPatch(
                (pos.x * zoom, pos.y * zoom),
                w,
                h,
                boxstyle=f"round,pad=0,rounding_size={8 * zoom}",
                facecolor=node_color(member),
                edgecolor=SELECTED_EDGE_COLOR if selected else "gray",
                linewidth=2.5 if selected else 1.0,
                zorder=2,
            )
            box.set_gid(member.id)
            box.set_picker(True)
            ax.add_patch(box)
            ax.text(
                pos.x * zoom + w / 2,
                pos.y * zoom + h / 2,
                node_label(member),
                ha="center",
                va="center",
                fontsize=max(9 * zoom, 4),
                zorder=3,
            )

        def on_pick(event):
            member = members_by_id.get(event.artist.get_gid())
            if member is None:
                return
            if getattr(event.mouseevent, "dblclick", False):
                if on_member_edit is not None:
                    on_member_edit(member)
            elif on_member_click is not None:
                on_member_click(member)

        fig.canvas.mpl_connect("pick_event", on_pick)

        pad = config.horizontal_gap * zoom
        ax.set_xlim(min_x * zoom - pad, max_x * zoom + pad)
        ax.set_ylim(max_y * zoom + pad, min_y * zoom - pad)  # layout y grows downwards
        ax.set_aspect("equal")
        ax.axis("off")

    fig.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
        print(f"Tree saved to {output_path}")
    elif show:
        plt.show()

    return fig


def diagram_to_dot(diagram: Diagram, zoom: float = 1.0) -> pydot.Dot:
    """
    Export a laid-out tree as a Graphviz graph with pinned node positions.

    Positions are box centres in points with the y axis flipped, so the graph
    renders as laid out with `neato -n`.
    """
    zoom = clamp_zoom(zoom)
    config = diagram.config

    P = pydot.Dot(graph_type="graph")
    P.set("splines", "ortho")
    P.set("outputorder", "edgesfirst")

    for member in diagram.members():
        pos = diagram.positions.get(member.id)
        if pos is None:
            continue
        cx = (pos.x + config.node_width / 2) * zoom
        cy = -(pos.y + config.node_height / 2) * zoom
        P.add_node(
            pydot.Node(
                str(member.id),
                label=node_label(member),
                shape="box",
                style="rounded,filled",
                fillcolor=node_color(member),
                fontsize="10",
                width=f"{config.node_width * zoom / POINTS_PER_INCH:.3f}",
                height=f"{config.node_height * zoom / POINTS_PER_INCH:.3f}",
                fixedsize="true",
                pos=f"{cx:g},{cy:g}!",
            )
        )

    if diagram.root is not None:
        for node in diagram.root.walk():
            if node.spouse is not None:
                P.add_edge(pydot.Edge(str(node.id), str(node.spouse.id), color="darkgoldenrod"))
            for child in node.children:
                P.add_edge(pydot.Edge(str(node.id), str(child.id), color=CONNECTOR_COLOR))

    logger.debug("DOT export with %d nodes", len(P.get_nodes()))
    return P


def write_dot(diagram: Diagram, output_path: Path, zoom: float = 1.0):
    """Write the Graphviz export; .dot/.gv as source, other extensions rendered by neato."""
    P = diagram_to_dot(diagram, zoom)
    ext = output_path.suffix.lower().lstrip(".")
    if ext in ("dot", "gv"):
        P.write(str(output_path), format="raw")
    else:
        if ext not in ("png", "svg", "pdf"):
            ext = "png"
        P.write(str(output_path), prog=["neato", "-n"], format=ext)
    print(f"Graph saved to {output_path}")
