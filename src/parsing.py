"""GEDCOM import: turn individuals and families into tree members and relationships."""

from pathlib import Path
import logging
import re

from ged4py import GedcomReader

from models import Member, Relationship, SpouseRelationship, TreeSnapshot

logger = logging.getLogger(__name__)


MONTH_MAP = {
    "JAN": 1,
    "JANUARY": 1,
    "FEB": 2,
    "FEBRUARY": 2,
    "MAR": 3,
    "MARCH": 3,
    "APR": 4,
    "APRIL": 4,
    "MAY": 5,
    "JUN": 6,
    "JUNE": 6,
    "JUL": 7,
    "JULY": 7,
    "AUG": 8,
    "AUGUST": 8,
    "SEP": 9,
    "SEPT": 9,
    "SEPTEMBER": 9,
    "OCT": 10,
    "OCTOBER": 10,
    "NOV": 11,
    "NOVEMBER": 11,
    "DEC": 12,
    "DECEMBER": 12,
}

GENDER_MAP = {"M": "male", "F": "female"}

QUALIFIER_RE = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|FROM|TO|BET\.?|AND|CIRCA|CA\.?|AROUND):?\s*",
    flags=re.IGNORECASE,
)

# (pattern, order of the captured groups); "m" may be a month name or a number
DATE_PATTERNS = [
    (re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"), "ymd"),  # 1839-08-29
    (re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$"), "dmy"),  # 25 NOV 1954, 02 May1838
    (re.compile(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$"), "mdy"),  # April 17, 1850
    (re.compile(r"^([A-Za-z]+)\.?,?\s*(\d{4})$"), "my"),  # NOV 1954, May, 1837
    (re.compile(r"^(\d{1,2})[-/\s](\d{1,2})[-/\s](\d{4})$"), "mdy"),  # 01-27-1920, 04 05 1911
    (re.compile(r"^(\d{4})$"), "y"),  # 1698
]


def _month_number(value: str) -> int | None:
    if value.isdigit():
        return int(value)
    return MONTH_MAP.get(value.upper().rstrip("."))


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a free-form GEDCOM date into ISO format (YYYY-MM-DD).
    Missing month or day default to 01. Returns None if the date cannot be parsed.

    Handles formats like "25 NOV 1954", "ABT 1905", "JAN 1905", "(01-27-1920)",
    "(SEPT. 17,1910)", "(1839-08-29)", "(About:1746-00-00)" and "(1789?)".
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    s = QUALIFIER_RE.sub("", s).strip()
    if not s:
        return None

    for pattern, order in DATE_PATTERNS:
        match = pattern.match(s)
        if not match:
            continue
        parts = dict(zip(order, match.groups()))
        year = int(parts["y"])
        month = _month_number(parts["m"]) if "m" in parts else 1
        day = int(parts["d"]) if "d" in parts else 1
        if month == 0:
            month = 1
        if day == 0:
            day = 1
        if month is None or not (1 <= month <= 12 and 1 <= day <= 31):
            continue
        return f"{year:04d}-{month:02d}-{day:02d}"

    return None


def member_id_from_xref(xref_id: str) -> str:
    """Member id for a GEDCOM xref_id like '@I_347421849@' -> 'I_347421849'."""
    member_id = xref_id.strip("@")
    if not member_id:
        raise ValueError(f"Empty xref id: {xref_id!r}")
    return member_id


def parse_gedcom(filepath: Path) -> GedcomReader:
    """Parse a GEDCOM file and return the reader object."""
    return GedcomReader(str(filepath))


def extract_name_parts(indi) -> tuple[str, str | None]:
    """Extract first name and last name from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return ("Unknown", None)

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        given, surname, _ = name_rec.value
        return (given or "Unknown", surname or None)

    # Fallback: string format "Given /Surname/"
    text = str(name_rec.value)
    match = re.match(r"^(.*?)\s*/(.*?)/", text)
    if match:
        return (match.group(1).strip() or "Unknown", match.group(2).strip() or None)
    return (text.strip() or "Unknown", None)


def extract_event_date(record, tag: str) -> str | None:
    """ISO date of an event tag (BIRT, DEAT, MARR) or None."""
    event = record.sub_tag(tag)
    if event is None:
        return None
    date_rec = event.sub_tag("DATE")
    # ged4py may return DateValue objects
    if date_rec is None or not date_rec.value:
        return None
    return parse_date_string(str(date_rec.value))


def extract_gender(indi) -> str | None:
    sex_rec = indi.sub_tag("SEX")
    if sex_rec is None or not sex_rec.value:
        return None
    return GENDER_MAP.get(str(sex_rec.value).upper())


def normalize_data(
    reader: GedcomReader,
    tree_id: str | None = None,
    root_id: str | None = None,
    id_prefix: str = "",
) -> TreeSnapshot:
    """
    Extract members and relationships from parsed GEDCOM data.

    Each FAM record yields one spouse edge (when both partners are known) and
    one parent edge per parent and child. The member with `root_id` is flagged
    as root, otherwise the first individual in the file is. `root_id` is the
    GEDCOM id; `id_prefix` is prepended to every stored id so files that reuse
    the same xrefs (I1, F1, ...) can sit side by side in one store.
    """
    snapshot = TreeSnapshot()

    def local_id(xref_id: str) -> str:
        return id_prefix + member_id_from_xref(xref_id)

    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue

        first_name, last_name = extract_name_parts(rec)
        snapshot.members.append(
            Member(
                id=local_id(rec.xref_id),
                first_name=first_name,
                last_name=last_name,
                birth_date=extract_event_date(rec, "BIRT"),
                death_date=extract_event_date(rec, "DEAT"),
                gender=extract_gender(rec),
                tree_id=tree_id,
            )
        )

    if snapshot.members:
        if root_id is not None:
            root_id = id_prefix + root_id
        root = next((m for m in snapshot.members if m.id == root_id), snapshot.members[0])
        root.is_root = True
        if root_id is not None and root.id != root_id:
            logger.warning("Root %s not found in GEDCOM, using %s", root_id, root.id)

    for rec in reader.records0("FAM"):
        if rec.xref_id is None:
            continue
        fam_id = local_id(rec.xref_id)

        parent_ids = []
        for tag in ("HUSB", "WIFE"):
            partner = rec.sub_tag(tag)
            if partner is not None and partner.xref_id:
                parent_ids.append(local_id(partner.xref_id))

        if len(parent_ids) == 2:
            snapshot.spouse_relationships.append(
                SpouseRelationship(
                    id=fam_id,
                    tree_id=tree_id,
                    member1_id=parent_ids[0],
                    member2_id=parent_ids[1],
                    marriage_date=extract_event_date(rec, "MARR"),
                )
            )

        for child in rec.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            child_id = local_id(child.xref_id)
            for parent_id in parent_ids:
                snapshot.relationships.append(
                    Relationship(
                        id=f"{fam_id}-{parent_id}-{child_id}",
                        tree_id=tree_id,
                        parent_id=parent_id,
                        child_id=child_id,
                    )
                )

    return snapshot
