from main import main
from test_parsing import GEDCOM


def test_import_validate_render(tmp_path, capsys):
    ged = tmp_path / "family.ged"
    ged.write_bytes(GEDCOM.encode("utf-8"))
    db = tmp_path / "family_tree.db"
    out = tmp_path / "tree.png"

    assert main(["import-gedcom", str(ged), "--db", str(db), "--tree", "smith"]) == 0
    assert main(["validate", "--db", str(db), "--tree", "smith", "--strict"]) == 0
    assert main(["render", "--db", str(db), "--tree", "smith", "--out", str(out)]) == 0
    assert out.exists()
    assert "Placed 4 of 4 members" in capsys.readouterr().out


def test_render_dot_source(tmp_path):
    ged = tmp_path / "family.ged"
    ged.write_bytes(GEDCOM.encode("utf-8"))
    db = tmp_path / "family_tree.db"
    out = tmp_path / "tree.dot"

    main(["import-gedcom", str(ged), "--db", str(db), "--tree", "smith"])
    assert main(["render", "--db", str(db), "--tree", "smith", "--out", str(out)]) == 0
    assert "pos=" in out.read_text()


def test_unknown_tree_fails(tmp_path, capsys):
    db = tmp_path / "family_tree.db"
    assert main(["render", "--db", str(db), "--tree", "missing", "--out", str(tmp_path / "x.png")]) == 1
    assert "Tree missing not found" in capsys.readouterr().err


def test_import_link_render_linked(tmp_path, capsys):
    ged = tmp_path / "family.ged"
    ged.write_bytes(GEDCOM.encode("utf-8"))
    db = tmp_path / "family_tree.db"
    out = tmp_path / "linked.png"

    assert main(["import-gedcom", str(ged), "--db", str(db), "--tree", "smith"]) == 0
    assert main(["import-gedcom", str(ged), "--db", str(db), "--tree", "jones"]) == 0
    assert main(
        [
            "link",
            "--db", str(db),
            "--id", "L1",
            "--name", "Smith + Jones",
            "--tree1", "smith",
            "--tree2", "jones",
            "--member1", "smith:I3",
            "--member2", "jones:I4",
        ]
    ) == 0
    assert main(["render", "--db", str(db), "--linked", "L1", "--out", str(out)]) == 0
    assert out.exists()

    output = capsys.readouterr().out
    assert "Linked smith and jones as L1" in output
    # Both imports keep their rows, so the linked view holds all eight members
    assert "of 8 members" in output


def test_link_unknown_member_fails(tmp_path, capsys):
    ged = tmp_path / "family.ged"
    ged.write_bytes(GEDCOM.encode("utf-8"))
    db = tmp_path / "family_tree.db"

    main(["import-gedcom", str(ged), "--db", str(db), "--tree", "smith"])
    main(["import-gedcom", str(ged), "--db", str(db), "--tree", "jones"])
    args = ["link", "--db", str(db), "--id", "L1", "--tree1", "smith", "--tree2", "jones"]
    assert main(args + ["--member1", "I3", "--member2", "jones:I4"]) == 1
    assert "Member I3 not found in tree smith" in capsys.readouterr().err
