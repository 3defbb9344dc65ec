"""Tests for best-effort removal of the settings file."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from mvnoauth.output import OutputManager, set_output
from mvnoauth.settings import remove_settings_file


class TestRemoveSettingsFile:
    def test_removes_existing_file(self, tmp_path: Path, capfd) -> None:
        set_output(OutputManager(no_color=True))
        settings_path = tmp_path / "settings.xml"
        settings_path.write_text("<settings/>", encoding="utf-8")

        assert remove_settings_file(settings_path) is True

        assert not settings_path.exists()
        err = capfd.readouterr().err
        assert f"Cleaning up settings file: {settings_path}" in err
        assert "Settings file cleaned up successfully" in err

    def test_accepts_string_path(self, tmp_path: Path, quiet_output) -> None:
        settings_path = tmp_path / "settings.xml"
        settings_path.touch()
        assert remove_settings_file(str(settings_path)) is True
        assert not settings_path.exists()

    def test_missing_file_is_a_no_op(self, tmp_path: Path, capfd) -> None:
        set_output(OutputManager(no_color=True))

        assert remove_settings_file(tmp_path / "absent.xml") is False

        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_failure_is_a_warning(self, tmp_path: Path, capfd) -> None:
        set_output(OutputManager(no_color=True, quiet=True))
        settings_path = tmp_path / "settings.xml"
        settings_path.touch()

        with patch.object(Path, "unlink", side_effect=PermissionError("Permission denied")):
            assert remove_settings_file(settings_path) is False

        err = capfd.readouterr().err
        assert "Warning: Failed to cleanup settings file: Permission denied" in err
        assert settings_path.exists()

    def test_failure_as_actions_annotation(self, tmp_path: Path, capfd) -> None:
        set_output(OutputManager(no_color=True, annotations=True))
        settings_path = tmp_path / "settings.xml"
        settings_path.touch()

        with patch.object(Path, "unlink", side_effect=OSError("busy")):
            remove_settings_file(settings_path)

        assert "::warning::Failed to cleanup settings file: busy" in capfd.readouterr().out
