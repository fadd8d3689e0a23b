"""Tests for the command-line entry point."""

import logging
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from kdbxpass.cli import build_parser, main


FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_XML = FIXTURES_DIR / "sample.xml"


def ok(*args, **kwargs) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=args, returncode=0, stdout=b"", stderr=b"")


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        """Test default option values."""
        args = build_parser().parse_args(["export.xml"])
        assert args.filename == Path("export.xml")
        assert args.top_level is False
        assert args.unsorted is False
        assert args.dry_run is False
        assert args.pass_command == "pass"

    def test_top_level_short_flag(self) -> None:
        """Test that -t enables top-level group names."""
        assert build_parser().parse_args(["-t", "x.xml"]).top_level is True

    def test_filename_required(self) -> None:
        """Test that the export filename is required."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_verbose_and_quiet_exclusive(self) -> None:
        """Test that -v and -q can't be combined."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-v", "-q", "x.xml"])


class TestMain:
    """Tests for running the importer end to end."""

    def test_import_sample(self) -> None:
        """Test that every write goes through pass insert."""
        with patch("kdbxpass.store.subprocess.run", side_effect=ok) as run:
            assert main([str(SAMPLE_XML)]) == 0

        paths = [call.args[0][-1] for call in run.call_args_list]
        assert paths == [
            "Router",
            "Personal/Bank",
            "Personal/Passport",
            "Personal/Passport/scan.txt",
            "Personal/Passport/raw.bin",
            "Work/Servers/db01",
        ]

    def test_import_top_level(self) -> None:
        """Test that --top-level keeps the top-level group name."""
        with patch("kdbxpass.store.subprocess.run", side_effect=ok) as run:
            assert main(["--top-level", str(SAMPLE_XML)]) == 0
        assert run.call_args_list[0].args[0][-1] == "Database/Router"

    def test_dry_run_does_not_call_pass(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that --dry-run logs writes without running pass."""
        with patch("kdbxpass.store.subprocess.run") as run:
            with caplog.at_level(logging.INFO, logger="kdbxpass"):
                assert main(["--dry-run", str(SAMPLE_XML)]) == 0
        run.assert_not_called()
        assert "Save: Personal/Bank" in caplog.text
        assert "Would write 4 entries and 2 attachments" in caplog.text

    def test_missing_file(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that an unreadable input exits with status 1."""
        assert main(["/nonexistent/export.xml"]) == 1
        assert "Failed to read input" in caplog.text

    def test_decode_failure(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a structurally invalid export exits with status 1."""
        bad = tmp_path / "bad.xml"
        bad.write_bytes(b"<KeePassFile><Root/></KeePassFile>")
        with patch("kdbxpass.store.subprocess.run") as run:
            assert main([str(bad)]) == 1
        run.assert_not_called()
        assert "Failed to process xml" in caplog.text

    def test_write_failure(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a pass failure stops the import with the path."""
        failing = subprocess.CompletedProcess(args=[], returncode=1, stdout=b"", stderr=b"boom")
        with patch("kdbxpass.store.subprocess.run", return_value=failing) as run:
            assert main([str(SAMPLE_XML)]) == 1
        run.assert_called_once()
        assert "Failed while dumping to pass at Router" in caplog.text
