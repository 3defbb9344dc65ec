"""Tests for mvnoauth.runtime -- GitHub Actions and local environments."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mvnoauth.exceptions import FilesystemError
from mvnoauth.output import REDACTED, OutputManager, get_output, set_output
from mvnoauth.runtime import (
    SETTINGS_FILE_KEY,
    GitHubActionsRuntime,
    LocalRuntime,
    detect_runtime,
)


@pytest.fixture(autouse=True)
def _plain_output() -> None:
    set_output(OutputManager(no_color=True))


class TestDetectRuntime:
    def test_github_actions(self) -> None:
        assert isinstance(detect_runtime({"GITHUB_ACTIONS": "true"}), GitHubActionsRuntime)

    @pytest.mark.parametrize("environ", [{}, {"GITHUB_ACTIONS": "false"}, {"CI": "true"}])
    def test_local(self, environ: dict[str, str]) -> None:
        assert isinstance(detect_runtime(environ), LocalRuntime)


# ---------------------------------------------------------------------------
# GitHub Actions
# ---------------------------------------------------------------------------


class TestGitHubActionsInputs:
    def test_input_name_mapping(self) -> None:
        runtime = GitHubActionsRuntime({"INPUT_CLIENT-ID": "cid", "INPUT_MY_INPUT": "v"})
        assert runtime.get_input("client-id") == "cid"
        assert runtime.get_input("my input") == "v"

    def test_blank_input_is_none(self) -> None:
        runtime = GitHubActionsRuntime({"INPUT_SCOPE": "  "})
        assert runtime.get_input("scope") is None
        assert runtime.get_input("missing") is None

    def test_input_is_trimmed(self) -> None:
        runtime = GitHubActionsRuntime({"INPUT_SERVER-ID": " repo \n"})
        assert runtime.get_input("server-id") == "repo"


class TestGitHubActionsSecrets:
    def test_set_secret_masks_and_redacts(self, capfd) -> None:
        runtime = GitHubActionsRuntime({})

        runtime.set_secret("tok-123")
        get_output().info("token tok-123")

        captured = capfd.readouterr()
        assert captured.out == "::add-mask::tok-123\n"
        assert f"token {REDACTED}" in captured.err

    def test_empty_secret_not_masked(self, capfd) -> None:
        GitHubActionsRuntime({}).set_secret("")
        assert capfd.readouterr().out == ""


class TestGitHubActionsFileCommands:
    def test_set_output_appends_heredoc(self, tmp_path: Path) -> None:
        output_file = tmp_path / "output"
        output_file.write_text("earlier=1\n", encoding="utf-8")
        runtime = GitHubActionsRuntime({"GITHUB_OUTPUT": str(output_file)})

        runtime.set_output(SETTINGS_FILE_KEY, "/tmp/settings.xml")

        lines = output_file.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "earlier=1"
        assert lines[1].startswith("settings-file<<ghadelimiter_")
        delimiter = lines[1].split("<<", 1)[1]
        assert lines[2:] == ["/tmp/settings.xml", delimiter]

    def test_save_state_appends_to_state_file(self, tmp_path: Path) -> None:
        state_file = tmp_path / "state"
        runtime = GitHubActionsRuntime({"GITHUB_STATE": str(state_file)})

        runtime.save_state(SETTINGS_FILE_KEY, "/tmp/settings.xml")

        content = state_file.read_text(encoding="utf-8")
        assert content.startswith("settings-file<<ghadelimiter_")
        assert "\n/tmp/settings.xml\n" in content

    def test_legacy_commands_without_files(self, capfd) -> None:
        runtime = GitHubActionsRuntime({})

        runtime.set_output("settings-file", "/tmp/s.xml")
        runtime.save_state("settings-file", "/tmp/s.xml")

        assert capfd.readouterr().out.splitlines() == [
            "::set-output name=settings-file::/tmp/s.xml",
            "::save-state name=settings-file::/tmp/s.xml",
        ]

    def test_unwritable_output_file(self, tmp_path: Path) -> None:
        runtime = GitHubActionsRuntime({"GITHUB_OUTPUT": str(tmp_path / "missing" / "out")})

        with pytest.raises(FilesystemError, match="GITHUB_OUTPUT"):
            runtime.set_output("k", "v")

    def test_get_state(self) -> None:
        runtime = GitHubActionsRuntime({"STATE_settings-file": "/tmp/s.xml"})
        assert runtime.get_state(SETTINGS_FILE_KEY) == "/tmp/s.xml"
        assert runtime.get_state("other") is None


# ---------------------------------------------------------------------------
# Local
# ---------------------------------------------------------------------------


class TestLocalRuntime:
    def test_no_inputs(self) -> None:
        assert LocalRuntime().get_input("server-id") is None

    def test_set_output_prints_to_stdout(self, capfd) -> None:
        LocalRuntime().set_output(SETTINGS_FILE_KEY, "/tmp/settings.xml")
        captured = capfd.readouterr()
        assert captured.out == "settings-file=/tmp/settings.xml\n"
        assert captured.err == ""

    def test_set_secret_only_redacts(self, capfd) -> None:
        LocalRuntime().set_secret("local-secret")
        get_output().print_data("local-secret")
        assert capfd.readouterr().out == f"{REDACTED}\n"

    def test_state_round_trip(self, tmp_path: Path) -> None:
        runtime = LocalRuntime(state_dir=tmp_path)

        runtime.save_state(SETTINGS_FILE_KEY, "/tmp/settings.xml")
        runtime.save_state("other", "x")

        assert runtime.get_state(SETTINGS_FILE_KEY) == "/tmp/settings.xml"
        data = json.loads((tmp_path / "state.json").read_text(encoding="utf-8"))
        assert data == {"settings-file": "/tmp/settings.xml", "other": "x"}

    def test_clear_state(self, tmp_path: Path) -> None:
        runtime = LocalRuntime(state_dir=tmp_path)
        runtime.save_state(SETTINGS_FILE_KEY, "/tmp/settings.xml")

        runtime.clear_state(SETTINGS_FILE_KEY)
        runtime.clear_state("never-set")

        assert runtime.get_state(SETTINGS_FILE_KEY) is None

    def test_missing_state_file(self, tmp_path: Path) -> None:
        assert LocalRuntime(state_dir=tmp_path).get_state(SETTINGS_FILE_KEY) is None

    @pytest.mark.parametrize("content", ["not json", "[1, 2]"])
    def test_unusable_state_file_ignored(self, tmp_path: Path, content: str) -> None:
        (tmp_path / "state.json").write_text(content, encoding="utf-8")
        assert LocalRuntime(state_dir=tmp_path).get_state(SETTINGS_FILE_KEY) is None

    def test_default_state_dir_is_data_dir(self, isolated_data: Path) -> None:
        runtime = LocalRuntime()
        runtime.save_state(SETTINGS_FILE_KEY, "/tmp/x.xml")
        assert runtime.state_path == isolated_data / "state.json"
        assert runtime.state_path.is_file()
