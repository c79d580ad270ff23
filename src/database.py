"""SQLite storage for family trees, used as the snapshot source for layout."""

from pathlib import Path
import sqlite3

from linking import combine_snapshots
from models import (
    FamilyTree,
    LinkedTree,
    Member,
    Relationship,
    SpouseRelationship,
    TreeSnapshot,
)


def create_database(db_path: Path | str) -> sqlite3.Connection:
    """Create SQLite database with tree, member, relationship and link tables."""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS family_trees (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            owner_id TEXT,
            description TEXT,
            is_public INTEGER NOT NULL DEFAULT 0
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS family_members (
            id TEXT NOT NULL,
            tree_id TEXT NOT NULL,
            first_name TEXT NOT NULL,
            last_name TEXT,
            birth_date TEXT,
            death_date TEXT,
            gender TEXT,
            photo_url TEXT,
            bio TEXT,
            is_root INTEGER NOT NULL DEFAULT 0,
            position_x REAL,
            position_y REAL,
            PRIMARY KEY (tree_id, id),
            FOREIGN KEY (tree_id) REFERENCES family_trees(id)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS relationships (
            id TEXT NOT NULL,
            tree_id TEXT NOT NULL,
            parent_id TEXT NOT NULL,
            child_id TEXT NOT NULL,
            relationship_type TEXT NOT NULL DEFAULT 'biological',
            PRIMARY KEY (tree_id, id),
            FOREIGN KEY (tree_id) REFERENCES family_trees(id)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS spouse_relationships (
            id TEXT NOT NULL,
            tree_id TEXT NOT NULL,
            member1_id TEXT NOT NULL,
            member2_id TEXT NOT NULL,
            relationship_type TEXT NOT NULL DEFAULT 'married',
            marriage_date TEXT,
            divorce_date TEXT,
            PRIMARY KEY (tree_id, id),
            FOREIGN KEY (tree_id) REFERENCES family_trees(id)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS linked_trees (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            tree1_id TEXT NOT NULL,
            tree2_id TEXT NOT NULL,
            link_member1_id TEXT NOT NULL,
            link_member2_id TEXT NOT NULL,
            owner_id TEXT,
            created_at TEXT
        )
    """)

    conn.commit()
    return conn


def store_tree(
    conn: sqlite3.Connection,
    tree: FamilyTree,
    members: list[Member],
    relationships: list[Relationship],
    spouse_relationships: list[SpouseRelationship],
):
    """
    Write a tree with its members and relationships, replacing whatever was
    stored for that tree before. Row ids only need to be unique within a tree.
    """
    cursor = conn.cursor()

    cursor.execute(
        """
        INSERT OR REPLACE INTO family_trees (id, name, owner_id, description, is_public)
        VALUES (?, ?, ?, ?, ?)
        """,
        (tree.id, tree.name, tree.owner_id, tree.description, int(tree.is_public)),
    )

    for table in ("family_members", "relationships", "spouse_relationships"):
        cursor.execute(f"DELETE FROM {table} WHERE tree_id = ?", (tree.id,))

    # A repeated id within the tree keeps its first row
    cursor.executemany(
        """
        INSERT OR IGNORE INTO family_members
        (id, tree_id, first_name, last_name, birth_date, death_date, gender, photo_url, bio, is_root, position_x, position_y)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                m.id,
                tree.id,
                m.first_name,
                m.last_name,
                m.birth_date,
                m.death_date,
                m.gender,
                m.photo_url,
                m.bio,
                int(m.is_root),
                m.position_x,
                m.position_y,
            )
            for m in members
        ],
    )

    # Rows without an id get one derived from the tree and their index
    cursor.executemany(
        """
        INSERT OR IGNORE INTO relationships (id, tree_id, parent_id, child_id, relationship_type)
        VALUES (?, ?, ?, ?, ?)
        """,
        [
            (r.id or f"{tree.id}-rel-{i}", tree.id, r.parent_id, r.child_id, r.relationship_type)
            for i, r in enumerate(relationships)
        ],
    )

    cursor.executemany(
        """
        INSERT OR IGNORE INTO spouse_relationships
        (id, tree_id, member1_id, member2_id, relationship_type, marriage_date, divorce_date)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                s.id or f"{tree.id}-spouse-{i}",
                tree.id,
                s.member1_id,
                s.member2_id,
                s.relationship_type,
                s.marriage_date,
                s.divorce_date,
            )
            for i, s in enumerate(spouse_relationships)
        ],
    )

    conn.commit()


def store_linked_tree(conn: sqlite3.Connection, linked: LinkedTree):
    """Insert a link between two trees."""
    conn.execute(
        """
        INSERT OR REPLACE INTO linked_trees
        (id, name, tree1_id, tree2_id, link_member1_id, link_member2_id, owner_id, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            linked.id,
            linked.name,
            linked.tree1_id,
            linked.tree2_id,
            linked.link_member1_id,
            linked.link_member2_id,
            linked.owner_id,
            linked.created_at,
        ),
    )
    conn.commit()


def get_tree(conn: sqlite3.Connection, tree_id: str) -> FamilyTree:
    """Fetch one tree's metadata; raises LookupError if it does not exist."""
    row = conn.execute(
        "SELECT id, name, owner_id, description, is_public FROM family_trees WHERE id = ?",
        (tree_id,),
    ).fetchone()
    if row is None:
        raise LookupError(f"Tree {tree_id} not found")
    return FamilyTree(id=row[0], name=row[1], owner_id=row[2], description=row[3], is_public=bool(row[4]))


def get_linked_tree(conn: sqlite3.Connection, linked_id: str) -> LinkedTree:
    """Fetch one tree link; raises LookupError if it does not exist."""
    row = conn.execute(
        """
        SELECT id, name, tree1_id, tree2_id, link_member1_id, link_member2_id, owner_id, created_at
        FROM linked_trees WHERE id = ?
        """,
        (linked_id,),
    ).fetchone()
    if row is None:
        raise LookupError(f"Linked tree {linked_id} not found")
    return LinkedTree(*row)


def _load_rows(conn: sqlite3.Connection, tree_id: str) -> TreeSnapshot:
    # Insertion order (rowid) keeps root fallback and child order stable
    cursor = conn.cursor()

    cursor.execute(
        """
        SELECT id, first_name, last_name, birth_date, death_date, gender, photo_url, bio,
               is_root, tree_id, position_x, position_y
        FROM family_members WHERE tree_id = ? ORDER BY rowid
        """,
        (tree_id,),
    )
    members = [
        Member(
            id=row[0],
            first_name=row[1],
            last_name=row[2],
            birth_date=row[3],
            death_date=row[4],
            gender=row[5],
            photo_url=row[6],
            bio=row[7],
            is_root=bool(row[8]),
            tree_id=row[9],
            position_x=row[10],
            position_y=row[11],
        )
        for row in cursor.fetchall()
    ]

    cursor.execute(
        """
        SELECT id, tree_id, parent_id, child_id, relationship_type
        FROM relationships WHERE tree_id = ? ORDER BY rowid
        """,
        (tree_id,),
    )
    relationships = [
        Relationship(id=row[0], tree_id=row[1], parent_id=row[2], child_id=row[3], relationship_type=row[4])
        for row in cursor.fetchall()
    ]

    cursor.execute(
        """
        SELECT id, tree_id, member1_id, member2_id, relationship_type, marriage_date, divorce_date
        FROM spouse_relationships WHERE tree_id = ? ORDER BY rowid
        """,
        (tree_id,),
    )
    spouse_relationships = [
        SpouseRelationship(
            id=row[0],
            tree_id=row[1],
            member1_id=row[2],
            member2_id=row[3],
            relationship_type=row[4],
            marriage_date=row[5],
            divorce_date=row[6],
        )
        for row in cursor.fetchall()
    ]

    return TreeSnapshot(members, relationships, spouse_relationships)


def load_tree(conn: sqlite3.Connection, tree_id: str) -> TreeSnapshot:
    """Read every member and relationship of one tree."""
    get_tree(conn, tree_id)
    return _load_rows(conn, tree_id)


def load_linked_tree(conn: sqlite3.Connection, linked_id: str) -> TreeSnapshot:
    """Read both trees of a link as one snapshot, joined by the link spouse edge."""
    linked = get_linked_tree(conn, linked_id)
    return combine_snapshots(
        _load_rows(conn, linked.tree1_id), _load_rows(conn, linked.tree2_id), linked
    )
