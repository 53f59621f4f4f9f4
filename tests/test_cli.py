# tests/test_cli.py
import json

import pytest
from typer.testing import CliRunner

from nodian import __version__
from nodian.cli import app

runner = CliRunner()

@pytest.fixture(autouse=True)
def quiet_logging(mocker):
    # Keep loguru sinks away from the runner's captured streams
    return mocker.patch("nodian.cli.setup_logging")

@pytest.fixture
def notes_dir(tmp_path):
    return tmp_path / "notes_base"

def _notes(notes_dir, *args, input=None):
    return runner.invoke(app, ["notes", "--base-dir", str(notes_dir), *args], input=input)

def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output

def test_verbose_flag_reaches_logging_setup(quiet_logging):
    runner.invoke(app, ["-v", "algorithms"])
    quiet_logging.assert_called_once_with(level="WARNING", verbose=True)

def test_hash_defaults_to_md5():
    result = runner.invoke(app, ["hash", "abc"])
    assert result.exit_code == 0
    assert result.output.strip() == "900150983cd24fb0d6963f7d28e17f72"

def test_hash_reads_stdin_with_dash():
    result = runner.invoke(app, ["hash", "-a", "SHA256", "-"], input="abc")
    assert result.output.strip() == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

def test_algorithms_lists_display_names():
    result = runner.invoke(app, ["algorithms"])
    lines = result.output.splitlines()
    assert lines[0] == "CRC-32"
    assert "SHA512/224" in lines
    assert len(lines) == 18

def test_encode_and_decode():
    assert runner.invoke(app, ["encode", "hello"]).output.strip() == "aGVsbG8="
    result = runner.invoke(app, ["decode", "-e", "URL", "a+b%26c"])
    assert result.output.strip() == "a b&c"

def test_decode_error_exits_with_message():
    result = runner.invoke(app, ["decode", "@@@"])
    assert result.exit_code == 1
    assert "Error: Invalid Base64 input" in result.output

def test_json_compact_and_pretty(tmp_path):
    result = runner.invoke(app, ["json", "--compact", '{ "a" : [1, 2] }'])
    assert result.output.strip() == '{"a":[1,2]}'
    source = tmp_path / "data.json"
    source.write_text('{"a":1}', encoding="utf-8")
    result = runner.invoke(app, ["json", "--file", str(source)])
    assert result.output == '{\n  "a": 1\n}\n'

def test_json_parse_error():
    result = runner.invoke(app, ["json", "{broken"])
    assert result.exit_code == 1
    assert "Error: Invalid JSON" in result.output

def test_timestamp_conversions_in_utc():
    assert runner.invoke(app, ["ts", "to-date", "0", "--utc"]).output.strip() == "1970-01-01 00:00:00"
    result = runner.invoke(app, ["ts", "to-date", "1700000000123", "-u", "milliseconds", "--utc"])
    assert result.output.strip() == "2023-11-14 22:13:20"
    result = runner.invoke(app, ["ts", "to-epoch", "2023-11-14 22:13:20", "--utc"])
    assert result.output.strip() == "1700000000"

def test_timestamp_errors():
    result = runner.invoke(app, ["ts", "to-date", "soon"])
    assert result.exit_code == 1
    assert "Error: Invalid timestamp" in result.output
    result = runner.invoke(app, ["ts", "to-epoch", "14/11/2023"])
    assert result.exit_code == 1
    assert "Invalid date-time format" in result.output

def test_days_in_month():
    assert runner.invoke(app, ["ts", "days", "2024", "2"]).output.strip() == "29"
    assert runner.invoke(app, ["ts", "days", "1900", "2"]).output.strip() == "28"
    assert runner.invoke(app, ["ts", "days", "2024", "13"]).exit_code == 1

def test_pick_clamps_day_to_new_month():
    result = runner.invoke(app, ["ts", "pick", "--from", "2024-01-31 10:00:00", "--month", "2"])
    assert result.output.strip() == "2024-02-29 10:00:00"
    result = runner.invoke(app, ["ts", "pick", "--from", "2024-02-29 10:00:00", "--year", "2023"])
    assert result.output.strip() == "2023-02-28 10:00:00"

def test_pick_rejects_invalid_selection():
    result = runner.invoke(app, ["ts", "pick", "--from", "2024-01-01 00:00:00", "--hour", "24"])
    assert result.exit_code == 1
    assert result.output.startswith("Error:")

def test_notes_lifecycle(notes_dir):
    assert _notes(notes_dir, "new", "projects", "--folder").output.strip() == "projects"
    assert _notes(notes_dir, "new", "plan", "-p", "projects").output.strip() == "projects/plan.md"

    result = _notes(notes_dir, "write", "projects/plan.md", "--text", "# Plan")
    assert result.output.strip() == "Saved projects/plan.md"
    _notes(notes_dir, "write", "projects/plan.md", "-a", input="\nsteps")
    assert (notes_dir / "nodian" / "projects" / "plan.md").read_text(encoding="utf-8") == "# Plan\nsteps"

    assert _notes(notes_dir, "show", "projects/plan.md").output == "# Plan\nsteps"
    assert "<h1>Plan</h1>" in _notes(notes_dir, "show", "projects/plan.md", "--html").output

    result = _notes(notes_dir, "rename", "projects/plan.md", "roadmap.md")
    assert result.output.strip() == "projects/roadmap.md"

    _notes(notes_dir, "new", "inbox")
    assert _notes(notes_dir, "ls").output.splitlines() == ["projects/", "inbox.md"]
    assert _notes(notes_dir, "ls", "--tree").output.splitlines() == ["projects/", "  roadmap.md", "inbox.md"]

    result = _notes(notes_dir, "rm", "projects", "--yes")
    assert result.output.strip() == "Deleted projects"
    assert not (notes_dir / "nodian" / "projects").exists()

def test_rm_asks_for_confirmation(notes_dir):
    _notes(notes_dir, "new", "keep")
    result = _notes(notes_dir, "rm", "keep.md", input="n\n")
    assert result.exit_code == 1
    assert (notes_dir / "nodian" / "keep.md").exists()
    result = _notes(notes_dir, "rm", "keep.md", input="y\n")
    assert result.exit_code == 0
    assert not (notes_dir / "nodian" / "keep.md").exists()

def test_notes_errors(notes_dir):
    _notes(notes_dir, "new", "dup")
    result = _notes(notes_dir, "new", "dup")
    assert result.exit_code == 1
    assert result.output.startswith("Error:")
    assert _notes(notes_dir, "show", "missing.md").exit_code == 1
    assert _notes(notes_dir, "show", "../outside.md").exit_code == 1

def test_config_show_and_init(isolated_user_dirs):
    shown = json.loads(runner.invoke(app, ["config", "show"]).output)
    assert shown["default_hash_algorithm"] == "MD5"
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    config_file = isolated_user_dirs / "nodian" / "config.json"
    assert json.loads(config_file.read_text(encoding="utf-8")) == shown
    assert runner.invoke(app, ["config", "init"]).exit_code == 1
    assert runner.invoke(app, ["config", "init", "--force"]).exit_code == 0

def test_json_file_that_is_not_utf8(tmp_path):
    source = tmp_path / "latin1.json"
    source.write_bytes(b'{"name": "\xe9t\xe9"}')
    result = runner.invoke(app, ["json", "--file", str(source)])
    assert result.exit_code == 1
    assert "Error: Could not read" in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)
