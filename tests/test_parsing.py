import pytest

from parsing import member_id_from_xref, normalize_data, parse_date_string, parse_gedcom

GEDCOM = """0 HEAD
1 SOUR TEST
1 GEDC
2 VERS 5.5.1
2 FORM LINEAGE-LINKED
1 CHAR UTF-8
0 @I1@ INDI
1 NAME John /Smith/
1 SEX M
0 @I2@ INDI
1 NAME Mary /Jones/
1 SEX F
0 @I3@ INDI
1 NAME Tom /Smith/
1 SEX M
0 @I4@ INDI
1 NAME Ann /Smith/
1 SEX F
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 CHIL @I3@
1 CHIL @I4@
0 TRLR
"""


@pytest.mark.parametrize(
    "text, expected",
    [
        ("25 NOV 1954", "1954-11-25"),
        ("ABT 1905", "1905-01-01"),
        ("JAN 1905", "1905-01-01"),
        ("(01-27-1920)", "1920-01-27"),
        ("(02 May1838)", "1838-05-02"),
        ("(04 05 1911)", "1911-04-05"),
        ("(1839-08-29)", "1839-08-29"),
        ("(SEPT. 17,1910)", "1910-09-17"),
        ("(Oct.12,1929)", "1929-10-12"),
        ("(May, 1837)", "1837-05-01"),
        ("(1789?)", "1789-01-01"),
        ("(About:1746-00-00)", "1746-01-01"),
        ("(11 Aug. 1968)", "1968-08-11"),
        ("(April 17, 1850)", "1850-04-17"),
        ("sometime", None),
        ("13/45/1900", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_date_string(text, expected):
    assert parse_date_string(text) == expected


def test_member_id_from_xref():
    assert member_id_from_xref("@I_347421849@") == "I_347421849"
    with pytest.raises(ValueError):
        member_id_from_xref("@@")


def test_normalize_gedcom(tmp_path):
    path = tmp_path / "family.ged"
    path.write_bytes(GEDCOM.encode("utf-8"))

    snapshot = normalize_data(parse_gedcom(path), tree_id="smith")

    ids = [m.id for m in snapshot.members]
    assert ids == ["I1", "I2", "I3", "I4"]
    john = snapshot.members[0]
    assert (john.first_name, john.last_name, john.gender) == ("John", "Smith", "male")
    assert john.is_root
    assert john.tree_id == "smith"
    assert snapshot.members[1].gender == "female"

    assert [(s.member1_id, s.member2_id) for s in snapshot.spouse_relationships] == [("I1", "I2")]
    assert [(r.parent_id, r.child_id) for r in snapshot.relationships] == [
        ("I1", "I3"),
        ("I2", "I3"),
        ("I1", "I4"),
        ("I2", "I4"),
    ]


def test_normalize_gedcom_with_root(tmp_path):
    path = tmp_path / "family.ged"
    path.write_bytes(GEDCOM.encode("utf-8"))

    snapshot = normalize_data(parse_gedcom(path), root_id="I2")
    assert [m.id for m in snapshot.members if m.is_root] == ["I2"]


def test_normalize_gedcom_with_id_prefix(tmp_path):
    path = tmp_path / "family.ged"
    path.write_bytes(GEDCOM.encode("utf-8"))

    snapshot = normalize_data(parse_gedcom(path), tree_id="smith", root_id="I2", id_prefix="smith:")
    assert [m.id for m in snapshot.members] == ["smith:I1", "smith:I2", "smith:I3", "smith:I4"]
    assert [m.id for m in snapshot.members if m.is_root] == ["smith:I2"]
    assert [s.id for s in snapshot.spouse_relationships] == ["smith:F1"]
    assert snapshot.spouse_relationships[0].pair == {"smith:I1", "smith:I2"}
    assert snapshot.relationships[0].id == "smith:F1-smith:I1-smith:I3"
    assert snapshot.relationships[0].child_id == "smith:I3"
