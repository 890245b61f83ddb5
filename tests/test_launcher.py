"""Tests for resolution and launching of the selected executable."""

import signal
from unittest.mock import MagicMock, patch

import pytest
import semantic_version

import launcher
from constants import Constants
from errors import (
    ExecutableNotFound,
    NoLocalVersionsFound,
    NoMatchingVersion,
    SpawnFailed,
    StoreUnresolvable,
)
from launcher import _exit_status, executable_for, launch, resolve_version, run
from versioning.models import PinSource

STANDARD_STORE = ["v16.20.0", "v18.16.0", "v18.17.1", "v20.5.0"]


class TestResolveVersion:
    """End-to-end resolution against an on-disk store and project tree."""

    def test_pinned_range(self, make_store, project):
        make_store(STANDARD_STORE)
        (project / ".nvmrc").write_text("18.x\n")
        resolution = resolve_version(str(project))
        assert resolution.version == semantic_version.Version("18.17.1")
        assert resolution.pin.source is PinSource.RC_FILE
        assert str(resolution.range) == "18.x"
        assert resolution.start_dir == str(project)

    def test_manifest_pin(self, make_store, project):
        make_store(STANDARD_STORE)
        (project.parent / "package.json").write_text('{"engines": {"node": "^16.0.0"}}')
        assert resolve_version(str(project)).version == semantic_version.Version("16.20.0")

    def test_unparsable_pin_picks_newest(self, make_store, project):
        make_store(STANDARD_STORE)
        (project / ".nvmrc").write_text("lts/*")
        resolution = resolve_version(str(project))
        assert resolution.range is None
        assert resolution.version == semantic_version.Version("20.5.0")

    def test_empty_nvmrc_shadows_parent_pin(self, make_store, project):
        make_store(STANDARD_STORE)
        (project / ".nvmrc").write_text("\n")
        (project.parent / ".nvmrc").write_text("16")
        resolution = resolve_version(str(project))
        assert resolution.pin.path == str(project / ".nvmrc")
        assert resolution.range is None
        assert resolution.version == semantic_version.Version("20.5.0")

    def test_empty_store(self, make_store, project):
        make_store([])
        (project / ".nvmrc").write_text("18")
        with pytest.raises(NoLocalVersionsFound):
            resolve_version(str(project))

    def test_no_match(self, make_store, project):
        make_store(["v14.0.0"])
        (project / ".nvmrc").write_text(">=16")
        with pytest.raises(NoMatchingVersion):
            resolve_version(str(project))

    def test_store_missing(self, tmp_path, project, monkeypatch):
        monkeypatch.setenv("NVM_DIR", str(tmp_path / "absent"))
        (project / ".nvmrc").write_text("18")
        with pytest.raises(StoreUnresolvable):
            resolve_version(str(project))


class TestExecutableFor:
    """Executable name derived from argv[0]."""

    @pytest.mark.parametrize("program,expected", [
        ("/usr/local/bin/node", "node"),
        ("npm", "npm"),
        ("/opt/shims/npx", "npx"),
        ("corepack.exe", "corepack"),
        ("node-launcher", "node"),
        (None, "node"),
    ])
    def test_program_names(self, program, expected):
        assert executable_for(program) == expected

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv(Constants.ENV_EXECUTABLE, "yarn")
        assert executable_for("node") == "yarn"

    def test_config_override(self, monkeypatch):
        monkeypatch.setattr(Constants, "CONFIG_EXECUTABLE", "pnpm")
        assert executable_for("node") == "pnpm"


class TestExitStatus:
    """Return code mapping."""

    def test_passthrough(self):
        assert _exit_status(0) == 0
        assert _exit_status(42) == 42

    def test_signal_maps_to_shell_status(self):
        assert _exit_status(-15) == 143
        assert _exit_status(-2) == 130


class TestRun:
    """Spawning the selected executable."""

    @patch("launcher.subprocess.Popen")
    def test_forwards_args_verbatim(self, mock_popen, make_store):
        root = make_store(["v18.17.1"])
        mock_popen.return_value = MagicMock(pid=1, **{"wait.return_value": 0})
        args = ["-e", "console.log('hi there')", "--", "", "--flag=1"]

        status = run(semantic_version.Version("18.17.1"), args)

        assert status == 0
        cmd = mock_popen.call_args[0][0]
        expected = (root / "versions" / "node" / "v18.17.1" / "bin" / "node").resolve()
        assert cmd == [str(expected)] + args

    @patch("launcher.subprocess.Popen")
    def test_propagates_nonzero_status(self, mock_popen, make_store):
        make_store(["v18.17.1"])
        mock_popen.return_value = MagicMock(pid=1, **{"wait.return_value": 42})
        assert run(semantic_version.Version("18.17.1"), []) == 42

    @patch("launcher.subprocess.Popen")
    def test_signaled_child(self, mock_popen, make_store):
        make_store(["v18.17.1"])
        mock_popen.return_value = MagicMock(pid=1, **{"wait.return_value": -15})
        assert run(semantic_version.Version("18.17.1"), []) == 143

    @patch("launcher.subprocess.Popen", side_effect=PermissionError("denied"))
    def test_spawn_failure(self, mock_popen, make_store):
        make_store(["v18.17.1"])
        with pytest.raises(SpawnFailed) as exc_info:
            run(semantic_version.Version("18.17.1"), [])
        assert exc_info.value.exit_code == 126

    def test_missing_executable_does_not_spawn(self, make_store):
        make_store(["v18.17.1"], with_executables=False)
        with patch("launcher.subprocess.Popen") as mock_popen:
            with pytest.raises(ExecutableNotFound):
                run(semantic_version.Version("18.17.1"), [])
        mock_popen.assert_not_called()

    @patch("launcher.subprocess.Popen")
    def test_signal_handlers_forward_and_restore(self, mock_popen, make_store):
        make_store(["v18.17.1"])
        child = MagicMock(pid=1)
        seen = {}

        def _wait():
            handler = signal.getsignal(signal.SIGTERM)
            seen["handler"] = handler
            handler(signal.SIGTERM, None)
            return 0

        child.wait.side_effect = _wait
        mock_popen.return_value = child
        before = signal.getsignal(signal.SIGTERM)

        run(semantic_version.Version("18.17.1"), [])

        child.send_signal.assert_called_once_with(signal.SIGTERM)
        assert seen["handler"] is not before
        assert signal.getsignal(signal.SIGTERM) == before

    @patch("launcher.subprocess.Popen")
    def test_sigint_ignored_while_waiting(self, mock_popen, make_store):
        make_store(["v18.17.1"])
        child = MagicMock(pid=1)
        seen = {}

        def _wait():
            seen["handler"] = signal.getsignal(signal.SIGINT)
            return 130

        child.wait.side_effect = _wait
        mock_popen.return_value = child
        before = signal.getsignal(signal.SIGINT)

        assert run(semantic_version.Version("18.17.1"), []) == 130

        assert seen["handler"] == signal.SIG_IGN
        child.send_signal.assert_not_called()
        assert signal.getsignal(signal.SIGINT) == before

    @pytest.mark.spawns_process
    def test_real_child_exit_code(self, make_store, write_exe):
        root = make_store(["v18.17.1"])
        write_exe(
            root / "versions" / "node" / "v18.17.1" / "bin" / "node",
            '#!/bin/sh\nexit "$1"\n',
        )
        assert run(semantic_version.Version("18.17.1"), ["7"]) == 7


class TestLaunch:
    """Full pipeline from argv."""

    @patch("launcher.subprocess.Popen")
    def test_launch_uses_program_name_and_cwd(self, mock_popen, make_store, project, write_exe):
        root = make_store(STANDARD_STORE)
        npm = write_exe(root / "versions" / "node" / "v18.17.1" / "bin" / "npm")
        (project / ".node-version").write_text("18.x")
        mock_popen.return_value = MagicMock(pid=1, **{"wait.return_value": 3})

        status = launch(["/usr/bin/npm", "install", "--save"], cwd=str(project))

        assert status == 3
        assert mock_popen.call_args[0][0] == [str(npm.resolve()), "install", "--save"]

    @patch("launcher.subprocess.Popen")
    def test_launch_defaults_to_current_directory(self, mock_popen, make_store, project, monkeypatch):
        make_store(STANDARD_STORE)
        (project / ".nvmrc").write_text("16")
        monkeypatch.chdir(project)
        mock_popen.return_value = MagicMock(pid=1, **{"wait.return_value": 0})

        launch(["node", "--version"])

        assert "v16.20.0" in mock_popen.call_args[0][0][0]

    def test_nothing_runs_on_selection_failure(self, make_store, project):
        make_store(["v14.0.0"])
        (project / ".nvmrc").write_text(">=16")
        with patch.object(launcher.subprocess, "Popen") as mock_popen:
            with pytest.raises(NoMatchingVersion):
                launch(["node"], cwd=str(project))
        mock_popen.assert_not_called()
