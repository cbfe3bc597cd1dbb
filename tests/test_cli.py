"""Unit tests for the s3sync command line interface."""

import json
from unittest.mock import PropertyMock, patch

import pytest
from click.testing import CliRunner

from s3sync import __version__
from s3sync.cli import main
from s3sync.exceptions import S3SyncConfigError, S3SyncListError
from s3sync.output import OutputFormatter


@pytest.fixture
def runner():
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def mock_config():
    """Mock the config module so user settings never leak into tests."""
    with patch("s3sync.cli.config") as mock:
        mock.log_level = "info"
        mock.max_threads = 10
        mock.endpoint = None
        mock.region = None
        yield mock


def _stats(**overrides) -> dict:
    stats = {"copies": 0, "deletes": 0, "skips": 0, "failures": 0, "cancelled": 0}
    stats.update(overrides)
    return stats


class TestHelp:
    """Tests for help and version output."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "FROM" in result.output
        assert "--delete" in result.output
        assert "--public" in result.output
        assert "--max-threads" in result.output
        assert "--endpoint" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_arguments(self, runner):
        """Both FROM and TO are required."""
        result = runner.invoke(main, ["./site"])

        assert result.exit_code == 2

    def test_invalid_max_threads(self, runner):
        """Zero threads is rejected by option validation."""
        result = runner.invoke(main, ["a", "b", "--max-threads", "0"])

        assert result.exit_code == 2


class TestLocalSync:
    """Tests that run a real sync between local directories."""

    def test_sync_copies_files(self, runner, tmp_path):
        src = tmp_path / "src"
        (src / "css").mkdir(parents=True)
        (src / "index.html").write_text("<html>")
        (src / "css" / "main.css").write_text("body{}")
        dst = tmp_path / "dst"

        result = runner.invoke(main, [str(src), str(dst)])

        assert result.exit_code == 0, result.output
        assert (dst / "index.html").read_text() == "<html>"
        assert (dst / "css" / "main.css").read_text() == "body{}"
        assert "OK" in result.output

    def test_sync_delete_and_json(self, runner, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.txt").write_text("a")
        dst = tmp_path / "dst"
        dst.mkdir()
        (dst / "stale.txt").write_text("stale")

        result = runner.invoke(main, [str(src), str(dst), "--delete", "--json"])

        assert result.exit_code == 0, result.output
        stats = json.loads(result.output)
        assert stats["copies"] == 1
        assert stats["deletes"] == 1
        assert not (dst / "stale.txt").exists()

    def test_dry_run(self, runner, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.txt").write_text("a")
        dst = tmp_path / "dst"

        result = runner.invoke(main, [str(src), str(dst), "--dry-run"])

        assert result.exit_code == 0
        assert "Dry run" in result.output
        assert not dst.exists()

    def test_source_not_directory(self, runner, tmp_path):
        src = tmp_path / "file.txt"
        src.write_text("x")

        result = runner.invoke(main, [str(src), str(tmp_path / "dst")])

        assert result.exit_code == 1
        assert "ERR:" in result.output


class TestEngineWiring:
    """Tests for option handling and exit codes with a mocked engine."""

    @patch("s3sync.cli.SyncEngine")
    def test_options_passed_to_engine(self, mock_engine_class, runner, tmp_path):
        mock_engine_class.return_value.sync.return_value = _stats()

        result = runner.invoke(
            main,
            [
                str(tmp_path),
                str(tmp_path / "out"),
                "-d",
                "-P",
                "--max-threads",
                "3",
                "--timeout",
                "30",
            ],
        )

        assert result.exit_code == 0
        options = mock_engine_class.call_args.args[3]
        assert options.delete is True
        assert options.public is True
        assert options.max_threads == 3
        assert options.timeout == 30.0
        mock_engine_class.return_value.sync.assert_called_once_with(
            str(tmp_path), str(tmp_path / "out")
        )

    @patch("s3sync.cli.SyncEngine")
    def test_config_max_threads_used(self, mock_engine_class, runner, mock_config, tmp_path):
        mock_config.max_threads = 25
        mock_engine_class.return_value.sync.return_value = _stats()

        runner.invoke(main, [str(tmp_path), str(tmp_path / "out")])

        assert mock_engine_class.call_args.args[3].max_threads == 25

    @patch("s3sync.cli.SyncEngine")
    def test_failures_exit_nonzero(self, mock_engine_class, runner, tmp_path):
        mock_engine_class.return_value.sync.return_value = _stats(copies=3, failures=1)

        result = runner.invoke(main, [str(tmp_path), str(tmp_path / "out")])

        assert result.exit_code == 1

    @patch("s3sync.cli.SyncEngine")
    def test_listing_error_exit(self, mock_engine_class, runner, tmp_path):
        mock_engine_class.return_value.sync.side_effect = S3SyncListError(
            "Listing objects failed: AccessDenied"
        )

        result = runner.invoke(main, [str(tmp_path), str(tmp_path / "out")])

        assert result.exit_code == 1
        assert "ERR: Listing objects failed: AccessDenied" in result.output

    @patch("s3sync.cli.SyncEngine")
    def test_keyboard_interrupt(self, mock_engine_class, runner, tmp_path):
        mock_engine_class.return_value.sync.side_effect = KeyboardInterrupt

        result = runner.invoke(main, [str(tmp_path), str(tmp_path / "out")])

        assert result.exit_code == 130

    @patch("s3sync.providers.s3.boto3")
    def test_invalid_s3_address(self, mock_boto3, runner, tmp_path):
        result = runner.invoke(main, ["s3:/", str(tmp_path)])

        assert result.exit_code == 1
        assert "ERR:" in result.output

    def test_invalid_config(self, runner, mock_config, tmp_path):
        type(mock_config).max_threads = PropertyMock(
            side_effect=S3SyncConfigError("Invalid max_threads value: 'x'")
        )

        result = runner.invoke(main, [str(tmp_path), str(tmp_path / "out")])

        assert result.exit_code == 1
        assert "Invalid max_threads" in result.output


class TestQuietLevels:
    """Tests for which messages survive --quiet and --log-level."""

    @patch("s3sync.cli.SyncEngine")
    def test_log_level_warning_keeps_warnings(self, mock_engine_class, runner, tmp_path):
        """--log-level warning hides progress but still shows warnings."""
        mock_engine_class.return_value.sync.return_value = _stats()

        runner.invoke(
            main, [str(tmp_path), str(tmp_path / "out"), "--log-level", "warning"]
        )

        out = mock_engine_class.call_args.args[2]
        assert out.quiet is True
        assert out.show_warnings is True

    @patch("s3sync.cli.SyncEngine")
    def test_log_level_error_hides_warnings(self, mock_engine_class, runner, tmp_path):
        """--log-level error leaves only errors."""
        mock_engine_class.return_value.sync.return_value = _stats()

        runner.invoke(
            main, [str(tmp_path), str(tmp_path / "out"), "--log-level", "error"]
        )

        assert mock_engine_class.call_args.args[2].show_warnings is False

    @patch("s3sync.cli.SyncEngine")
    def test_quiet_flag_hides_warnings(self, mock_engine_class, runner, tmp_path):
        """-q silences warnings too."""
        mock_engine_class.return_value.sync.return_value = _stats()

        runner.invoke(main, [str(tmp_path), str(tmp_path / "out"), "-q"])

        out = mock_engine_class.call_args.args[2]
        assert out.quiet is True
        assert out.show_warnings is False

    def test_formatter_warning_when_quiet(self, capsys):
        """A quiet formatter still prints warnings when asked to."""
        OutputFormatter(quiet=True, show_warnings=True).warning("slow down")
        OutputFormatter(quiet=True).warning("hidden")

        err = capsys.readouterr().err
        assert "slow down" in err
        assert "hidden" not in err
