"""Data classes for family tree entities and layout output."""

from dataclasses import dataclass, field

from config import LayoutConfig


@dataclass
class Member:
    id: str
    first_name: str
    last_name: str | None = None
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None  # ISO format YYYY-MM-DD or None
    gender: str | None = None  # "male", "female" or None
    photo_url: str | None = None
    bio: str | None = None
    is_root: bool = False
    tree_id: str | None = None
    # Stored coordinates are kept for round-tripping only; layout recomputes them
    position_x: float | None = None
    position_y: float | None = None

    @property
    def full_name(self) -> str:
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name

    @property
    def lifespan(self) -> str | None:
        """Year range such as '1901 - 1975' or '1950 - Present'; None without a birth year."""
        if not self.birth_date:
            return None
        birth_year = self.birth_date[:4]
        death_year = self.death_date[:4] if self.death_date else "Present"
        return f"{birth_year} - {death_year}"


@dataclass
class Relationship:
    parent_id: str
    child_id: str
    id: str | None = None
    tree_id: str | None = None
    relationship_type: str = "biological"


@dataclass
class SpouseRelationship:
    member1_id: str
    member2_id: str
    id: str | None = None
    tree_id: str | None = None
    relationship_type: str = "married"
    marriage_date: str | None = None
    divorce_date: str | None = None

    @property
    def pair(self) -> frozenset[str]:
        return frozenset((self.member1_id, self.member2_id))

    def partner_of(self, member_id: str) -> str | None:
        if self.member1_id == member_id:
            return self.member2_id
        if self.member2_id == member_id:
            return self.member1_id
        return None


@dataclass
class FamilyTree:
    id: str
    name: str
    owner_id: str | None = None
    description: str | None = None
    is_public: bool = False


@dataclass
class LinkedTree:
    id: str
    name: str
    tree1_id: str
    tree2_id: str
    link_member1_id: str
    link_member2_id: str
    owner_id: str | None = None
    created_at: str | None = None


@dataclass
class TreeSnapshot:
    """One consistent read of a tree: the three inputs of a layout pass."""

    members: list[Member] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    spouse_relationships: list[SpouseRelationship] = field(default_factory=list)


@dataclass
class TreeNode:
    member: Member
    children: list["TreeNode"] = field(default_factory=list)
    spouse: Member | None = None
    level: int = 0

    @property
    def id(self) -> str:
        return self.member.id

    def walk(self):
        """Yield this node and its descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class LineSegment:
    x1: float
    y1: float
    x2: float
    y2: float
    kind: str  # spouse, drop, rail, bridge, child


@dataclass
class Diagram:
    root: TreeNode | None
    positions: dict[str, Position]
    segments: list[LineSegment]
    config: LayoutConfig

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def members(self) -> list[Member]:
        """Every placed member (spouses included) in pre-order."""
        placed: list[Member] = []
        if self.root is None:
            return placed
        for node in self.root.walk():
            placed.append(node.member)
            if node.spouse is not None:
                placed.append(node.spouse)
        return placed

    def bounds(self) -> tuple[float, float, float, float]:
        """Bounding box (min_x, min_y, max_x, max_y) of every placed member box."""
        if not self.positions:
            return (0.0, 0.0, 0.0, 0.0)
        xs = [p.x for p in self.positions.values()]
        ys = [p.y for p in self.positions.values()]
        return (
            min(xs),
            min(ys),
            max(xs) + self.config.node_width,
            max(ys) + self.config.node_height,
        )
