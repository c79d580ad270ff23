"""Layout dimensions and viewport settings."""

from dataclasses import dataclass, fields

# Box and gap sizes in layout units (scale 1, origin at the root's top-left)
NODE_WIDTH = 180
NODE_HEIGHT = 120
HORIZONTAL_GAP = 32  # between sibling subtrees
VERTICAL_GAP = 72  # between generations
SPOUSE_GAP = 48  # between a member and their spouse

# Viewport zoom, applied by the renderer only
MIN_ZOOM = 0.5
MAX_ZOOM = 2.0
ZOOM_STEP = 0.1


@dataclass(frozen=True)
class LayoutConfig:
    node_width: float = NODE_WIDTH
    node_height: float = NODE_HEIGHT
    horizontal_gap: float = HORIZONTAL_GAP
    vertical_gap: float = VERTICAL_GAP
    spouse_gap: float = SPOUSE_GAP

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value <= 0:
                raise ValueError(f"{f.name} must be positive, got {value}")

    @property
    def couple_width(self) -> float:
        return 2 * self.node_width + self.spouse_gap

    @property
    def generation_height(self) -> float:
        """Vertical distance between the tops of two consecutive generations."""
        return self.node_height + self.vertical_gap


DEFAULT_CONFIG = LayoutConfig()
