"""
Test shell utilities.
"""

import subprocess
from unittest.mock import Mock, patch

import pytest

from pdf_tools.utils.shell import (
    RESTRICTED_PATH,
    _validate_command_safety,
    check_command_available,
    get_command_version,
    run_command_safely,
)


class TestValidateCommandSafety:
    """Test argument validation."""

    def test_accepts_plain_command(self, tmp_path):
        """Test a normal converter command passes."""
        _validate_command_safety([
            "gs", "-sDEVICE=pdfwrite", f"-sOutputFile={tmp_path / 'out.pdf'}", str(tmp_path / "in.pdf"),
        ])

    def test_empty_command(self):
        """Test empty commands are rejected."""
        with pytest.raises(ValueError, match="Empty command"):
            _validate_command_safety([])

    @pytest.mark.parametrize("cmd", [
        ["libreoffice", "--outdir", "/tmp/../etc", "in.docx"],
        ["gs", "-sOutputFile=/tmp/../../root/out.pdf", "in.pdf"],
    ])
    def test_path_traversal(self, cmd):
        """Test parent references are rejected, including in KEY=VALUE arguments."""
        with pytest.raises(ValueError, match="Path traversal"):
            _validate_command_safety(cmd)

    @pytest.mark.parametrize("arg", ["in\x00.pdf", "in\n.pdf"])
    def test_control_characters(self, arg):
        """Test NUL and newline are rejected."""
        with pytest.raises(ValueError, match="Control character"):
            _validate_command_safety(["convert", arg, "out.pdf"])

    def test_dots_in_names_are_fine(self):
        """Test names merely containing dots are not traversal."""
        _validate_command_safety(["convert", "/tmp/a..b.png", "/tmp/compressed-a..b.png"])


class TestRunCommandSafely:
    """Test subprocess invocation."""

    @patch("pdf_tools.utils.shell.subprocess.run")
    def test_runs_without_shell(self, mock_run):
        """Test the argument list is passed as-is with a restricted PATH."""
        mock_run.return_value = Mock(returncode=0, stdout="ok", stderr="")

        result = run_command_safely(["gs", "--version"], timeout=5)

        assert result.returncode == 0
        assert result.stdout == "ok"
        args, kwargs = mock_run.call_args
        assert args[0] == ["gs", "--version"]
        assert "shell" not in kwargs
        assert kwargs["timeout"] == 5
        assert kwargs["check"] is False
        assert kwargs["env"]["PATH"] == "/usr/bin:/bin:/usr/local/bin"

    @patch("pdf_tools.utils.shell.subprocess.run")
    def test_non_zero_is_returned(self, mock_run):
        """Test non-zero exit is reported, not raised."""
        mock_run.return_value = Mock(returncode=3, stdout="", stderr="failed")

        result = run_command_safely(["convert", "a.png", "b.png"])

        assert result.returncode == 3
        assert result.stderr == "failed"

    @patch("pdf_tools.utils.shell.subprocess.run")
    def test_extra_env(self, mock_run):
        """Test extra variables are merged into the environment."""
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

        run_command_safely(["gs", "--version"], env={"GS_LIB": "/opt/gs"})

        assert mock_run.call_args.kwargs["env"]["GS_LIB"] == "/opt/gs"

    @patch("pdf_tools.utils.shell.subprocess.run")
    def test_timeout_propagates(self, mock_run):
        """Test timeouts are re-raised to the caller."""
        mock_run.side_effect = subprocess.TimeoutExpired(["gs"], 1)

        with pytest.raises(subprocess.TimeoutExpired):
            run_command_safely(["gs", "in.pdf"], timeout=1)

    @patch("pdf_tools.utils.shell.subprocess.run")
    def test_spawn_failure_propagates(self, mock_run):
        """Test a missing executable surfaces as OSError."""
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory", "soffice")

        with pytest.raises(OSError):
            run_command_safely(["soffice", "--version"])

    def test_unsafe_command_never_runs(self):
        """Test validation happens before spawning."""
        with patch("pdf_tools.utils.shell.subprocess.run") as mock_run:
            with pytest.raises(ValueError):
                run_command_safely(["gs", "../in.pdf"])
        mock_run.assert_not_called()


class TestCommandProbes:
    """Test availability and version checks."""

    @patch("pdf_tools.utils.shell.run_command_safely")
    def test_version_first_line(self, mock_run_command):
        """Test the first line of output is the version."""
        mock_run_command.return_value = Mock(returncode=0, stdout="GPL Ghostscript 10.02.1\nCopyright", stderr="")
        assert get_command_version("gs") == "GPL Ghostscript 10.02.1"

    @patch("pdf_tools.utils.shell.run_command_safely")
    def test_version_missing_tool(self, mock_run_command):
        """Test a tool that cannot start has no version."""
        mock_run_command.side_effect = FileNotFoundError(2, "No such file or directory", "gs")
        assert get_command_version("gs") is None

    @patch("pdf_tools.utils.shell.run_command_safely")
    def test_version_failure_exit(self, mock_run_command):
        """Test a failing version probe has no version."""
        mock_run_command.return_value = Mock(returncode=1, stdout="", stderr="bad flag")
        assert get_command_version("convert", "-version") is None

    @patch("pdf_tools.utils.shell.subprocess.run")
    def test_command_available(self, mock_run):
        """Test which-based availability check."""
        mock_run.return_value = Mock(returncode=0)
        assert check_command_available("gs") is True
        mock_run.return_value = Mock(returncode=1)
        assert check_command_available("nonexistent") is False

    @patch("pdf_tools.utils.shell.subprocess.run")
    def test_availability_uses_runtime_path(self, mock_run):
        """Test tools are looked up on the same PATH they are spawned with."""
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

        check_command_available("gs")
        lookup_env = mock_run.call_args.kwargs["env"]
        run_command_safely(["gs", "--version"])
        spawn_env = mock_run.call_args.kwargs["env"]

        assert lookup_env["PATH"] == spawn_env["PATH"] == RESTRICTED_PATH
