"""
Test temporary artifact tracking.
"""

from pathlib import Path
from unittest.mock import patch

from pdf_tools.services.tracker import TempArtifactTracker


class TestTempArtifactTracker:
    """Test cleanup guarantees of the tracker."""

    def test_cleanup_removes_registered_files(self, tmp_path):
        """Test registered files are removed."""
        first = tmp_path / "a.pdf"
        second = tmp_path / "b.docx"
        first.write_text("a")
        second.write_text("b")

        tracker = TempArtifactTracker()
        tracker.register(first)
        tracker.register(second)

        assert tracker.cleanup() == []
        assert not first.exists()
        assert not second.exists()

    def test_unregistered_files_are_kept(self, tmp_path):
        """Test the tracker only touches what it owns."""
        owned = tmp_path / "owned.pdf"
        other = tmp_path / "other.pdf"
        owned.write_text("x")
        other.write_text("y")

        with TempArtifactTracker() as tracker:
            tracker.register(owned)

        assert not owned.exists()
        assert other.exists()

    def test_missing_files_are_not_errors(self, tmp_path):
        """Test absent paths are tolerated."""
        tracker = TempArtifactTracker()
        tracker.register(tmp_path / "never-created.pdf")
        assert tracker.cleanup() == []

    def test_cleanup_is_idempotent(self, tmp_path):
        """Test second cleanup does nothing."""
        path = tmp_path / "x.pdf"
        path.write_text("x")
        tracker = TempArtifactTracker()
        tracker.register(path)
        tracker.cleanup()

        path.write_text("recreated by someone else")
        assert tracker.cleanup() == []
        assert path.exists()

    def test_duplicate_registration(self, tmp_path):
        """Test a path registered twice is tracked once."""
        path = tmp_path / "x.pdf"
        tracker = TempArtifactTracker()
        tracker.register(path)
        tracker.register(str(path))
        assert tracker.paths == [path]

    def test_failure_does_not_stop_other_removals(self, tmp_path):
        """Test each removal is attempted independently."""
        stuck = tmp_path / "stuck.pdf"
        free = tmp_path / "free.pdf"
        stuck.write_text("x")
        free.write_text("y")

        real_unlink = Path.unlink

        def flaky_unlink(self, *args, **kwargs):
            if self.name == "stuck.pdf":
                raise PermissionError("busy")
            return real_unlink(self, *args, **kwargs)

        tracker = TempArtifactTracker()
        tracker.register(stuck)
        tracker.register(free)
        with patch.object(Path, "unlink", flaky_unlink):
            failed = tracker.cleanup()

        assert failed == [stuck]
        assert stuck.exists()
        assert not free.exists()

    def test_context_manager_cleans_up_on_error(self, tmp_path):
        """Test cleanup runs when the block raises."""
        path = tmp_path / "x.pdf"
        path.write_text("x")

        try:
            with TempArtifactTracker() as tracker:
                tracker.register(path)
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert not path.exists()

    def test_register_after_cleanup_removes_immediately(self, tmp_path):
        """Test late registrations do not leak."""
        tracker = TempArtifactTracker()
        tracker.cleanup()
        late = tmp_path / "late.pdf"
        late.write_text("x")
        tracker.register(late)
        assert not late.exists()
