import json

from tkb_parser.cli import main

UFL_TEXT = (
    "1\tCơ sở văn hóa Việt Nam\t2\tCơ sở văn hóa Việt Nam- 09\n"
    "16/09/2024- 29/12/2024\t3\t6-7\tDB303\tPhạm Thị Tú Trinh\n"
)


def test_json_export(tmp_path, capsys):
    src = tmp_path / "tkb.txt"
    src.write_text(UFL_TEXT, encoding="utf-8")
    out = tmp_path / "out"

    assert main([str(src), "-u", "ufl", "-o", str(out)]) == 0

    data = json.loads((tmp_path / "out.json").read_text(encoding="utf-8"))
    assert data[0]["meetings"] == [{"weekday": 3, "room": "DB303", "lessonStart": 6, "lessonEnd": 7}]
    assert "Exported 1 course(s)" in capsys.readouterr().out


def test_state_remembers_institution(tmp_path):
    src = tmp_path / "tkb.txt"
    src.write_text(UFL_TEXT, encoding="utf-8")
    state = tmp_path / "state.json"

    assert main([str(src), "-u", "ufl", "-o", str(tmp_path / "a"), "--state", str(state)]) == 0
    # no input and no -u: both come from the state file
    assert main(["-o", str(tmp_path / "b"), "--state", str(state)]) == 0

    data = json.loads((tmp_path / "b.json").read_text(encoding="utf-8"))
    assert data[0]["name"] == "Cơ sở văn hóa Việt Nam"


def test_list_institutions(capsys):
    assert main(["--list-institutions"]) == 0
    out = capsys.readouterr().out
    assert "dut" in out and "ufl" in out


def test_missing_input_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt")]) == 1
    assert "Input file not found" in capsys.readouterr().err


def test_invalid_semester_start(tmp_path, capsys):
    src = tmp_path / "tkb.txt"
    src.write_text(UFL_TEXT, encoding="utf-8")
    assert main([str(src), "--semester-start", "2025-13-01"]) == 1
    assert "invalid --semester-start" in capsys.readouterr().err
