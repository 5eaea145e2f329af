"""Tests for the boltgen command line."""

from __future__ import annotations

from click.testing import CliRunner

from boltgen import __version__
from boltgen.cli import cli


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_threads_lists_table():
    result = CliRunner().invoke(cli, ["threads"])
    assert result.exit_code == 0
    assert "M8" in result.output
    assert "UNC" in result.output


class TestGenerate:
    def test_unknown_designation_fails(self, tmp_path):
        result = CliRunner().invoke(cli, ["generate", "M7", "--length", "10", "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_length_fails_before_writing(self, tmp_path):
        result = CliRunner().invoke(cli, ["generate", "M3", "--length=-2", "-f", "brep", "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert "shank.total_length" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_writes_bolt(self, tmp_path):
        result = CliRunner().invoke(cli, ["generate", "M3", "--length", "6", "-f", "brep", "-o", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "M3x6.brep").exists()
        assert "Wrote" in result.output

    def test_writes_bolt_and_nut(self, tmp_path):
        result = CliRunner().invoke(
            cli,
            ["generate", "M3", "-l", "6", "--nut", "--name", "pair", "-f", "brep", "-o", str(tmp_path)],
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "pair.brep").exists()
        assert (tmp_path / "pair_nut.brep").exists()


class TestBatch:
    def test_bad_yaml_fails(self, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("fasteners: [unclosed\n")
        result = CliRunner().invoke(cli, ["batch", str(config)])
        assert result.exit_code == 1
        assert "Error loading config" in result.output

    def test_unknown_key_fails(self, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("widgets: []\n")
        result = CliRunner().invoke(cli, ["batch", str(config)])
        assert result.exit_code == 1

    def test_failed_item_reported(self, tmp_path):
        config = tmp_path / "batch.yaml"
        config.write_text(
            "settings:\n"
            "  formats: [brep]\n"
            "fasteners:\n"
            "  - designation: M3\n"
            "    length: 6\n"
            "  - designation: M3\n"
        )
        result = CliRunner().invoke(cli, ["batch", str(config), "-o", str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "[ok]" in result.output
        assert "[failed]" in result.output
        assert (tmp_path / "out" / "M3x6.brep").exists()
