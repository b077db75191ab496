"""Tests for the command-line entry point against a vault on disk."""

import json
import re

import pytest

from deltanote.__main__ import build_parser, format_due_items, main

TODAY = ["--today", "2024-01-02"]


@pytest.fixture
def vault(tmp_path, monkeypatch):
    for name in ("DELTA_TARGET_RULE", "DELTA_AUTO_INSERT", "DELTA_TAG_NAME"):
        monkeypatch.delenv(name, raising=False)
    (tmp_path / "notes").mkdir()
    (tmp_path / "notes" / "Goals.md").write_text(
        "# Goals\nReview goals {{delta:2+2 2024-01-01}} ^abc123\nplain line\n",
        encoding="utf-8",
    )
    return tmp_path


def run_cli(vault, *args):
    return main(["--vault", str(vault), *TODAY, *args])


class TestLineCommands:
    def test_send_untagged_line(self, vault, capsys):
        assert run_cli(vault, "send", "notes/Goals.md", "3", "--days", "3") == 0

        line = (vault / "notes" / "Goals.md").read_text().split("\n")[2]
        assert re.fullmatch(r"plain line \{\{delta:3\+2 2024-01-05\}\} \^[a-z0-9]{6}", line)
        assert "Δ Block will resurface on 2024-01-05" in capsys.readouterr().err

    def test_resurface(self, vault):
        assert run_cli(vault, "resurface", "notes/Goals.md", "2") == 0

        text = (vault / "notes" / "Goals.md").read_text()
        assert "Review goals {{delta:4+2 2024-01-06}} ^abc123" in text

    def test_done(self, vault):
        assert run_cli(vault, "done", "notes/Goals.md", "2") == 0

        assert (vault / "notes" / "Goals.md").read_text().split("\n")[1] == "Review goals ^abc123"

    def test_done_on_untagged_line_fails(self, vault, capsys):
        assert run_cli(vault, "done", "notes/Goals.md", "3") == 1
        assert "No delta tag" in capsys.readouterr().err


class TestDueItems:
    def test_due_json(self, vault, capsys):
        assert run_cli(vault, "due", "--json") == 0

        [item] = json.loads(capsys.readouterr().out)
        assert item["document"] == "notes/Goals.md"
        assert item["line"] == 2
        assert item["reference"] == "abc123"
        assert item["interval"] == 2

    def test_due_text(self, vault, capsys):
        run_cli(vault, "due")

        out = capsys.readouterr().out
        assert "Δ Items Due Today (1)" in out
        assert "notes/Goals.md:2  Review goals" in out

    def test_insert(self, vault):
        (vault / "scratch.md").write_text("top\nbottom", encoding="utf-8")

        assert run_cli(vault, "insert", "scratch.md", "2") == 0

        assert (vault / "scratch.md").read_text() == (
            "top\n* **Δ Items Due Today**\n\t* ![[Goals#^abc123]]\nbottom"
        )


class TestSurfacing:
    def test_surface_creates_daily_note(self, vault):
        assert run_cli(vault, "surface") == 0

        daily = (vault / "journals" / "2024_01_02.md").read_text()
        assert daily == "* **Δ Due Today** (1 items)\n\t* ![[Goals#^abc123]]\n"
        goals = (vault / "notes" / "Goals.md").read_text()
        assert "{{delta:" not in goals
        assert "Review goals ^abc123" in goals

    def test_open_daily_note_twice(self, vault):
        (vault / "journals").mkdir()
        (vault / "journals" / "2024_01_02.md").write_text("# Tuesday\n", encoding="utf-8")

        assert run_cli(vault, "open", "journals/2024_01_02.md") == 0
        assert run_cli(vault, "open", "journals/2024_01_02.md") == 0

        daily = (vault / "journals" / "2024_01_02.md").read_text()
        assert daily.count("**Δ Due Today**") == 1
        assert daily.endswith("# Tuesday\n")


class TestVaultConfig:
    def test_vault_file_changes_daily_notes_folder(self, vault):
        (vault / ".deltanote.yaml").write_text(
            "delta:\n  daily_notes_folder: daily\n  daily_note_format: YYYY-MM-DD\n",
            encoding="utf-8",
        )

        assert run_cli(vault, "surface") == 0

        assert (vault / "daily" / "2024-01-02.md").exists()
        assert not (vault / "journals").exists()


class TestParser:
    def test_rejects_bad_date(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--today", "02/01/2024", "due"])

    def test_rejects_line_zero(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["done", "a.md", "0"])

    def test_format_no_items(self):
        assert format_due_items([]) == "No delta items due today!"
