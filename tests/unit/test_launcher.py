"""
应用启动器单元测试
"""

import os
import sys
from pathlib import Path

import pytest

from package_smoke.interfaces import LaunchError
from package_smoke.models import LaunchCommand, Platform
from package_smoke.pipeline import AppLauncher

from conftest import EXPECTED_OUTPUT, app_script, posix_only


class TestResolve:
    """启动命令计算测试"""

    def test_resolve_linux(self, smoke_config, tmp_path: Path):
        app_dir = tmp_path / "hello-world"
        command = AppLauncher(smoke_config).resolve(Platform.LINUX, app_dir)
        assert command.executable == app_dir / "hello-world"
        assert command.args == []
        assert command.shell is False

    def test_resolve_macos(self, smoke_config, tmp_path: Path):
        app_dir = tmp_path / "hello-world.app"
        command = AppLauncher(smoke_config).resolve(Platform.MACOS, app_dir)
        assert command.executable == app_dir / "Contents" / "MacOS" / "hello-world"
        assert command.args == []
        assert command.shell is False

    def test_resolve_windows(self, smoke_config, tmp_path: Path):
        app_dir = tmp_path / "hello-world"
        command = AppLauncher(smoke_config).resolve(Platform.WINDOWS, app_dir)
        assert command.executable == app_dir / "firefox.exe"
        assert command.args[0] == "--app"
        assert os.path.isabs(command.args[1])
        assert Path(command.args[1]) == app_dir / "qbrt" / "application.ini"
        assert command.args[2] == "--new-instance"
        assert command.shell is True


class TestLaunch:
    """应用启动测试"""

    def test_launch_collects_stdout(self, smoke_config):
        code = (
            "import sys; print('console.log: Hello,', end=''); sys.stdout.flush(); "
            "sys.stderr.write('GLib-GObject-CRITICAL noise\\n'); print(' World!')"
        )
        command = LaunchCommand(executable=Path(sys.executable), args=["-c", code])

        result = AppLauncher(smoke_config).launch(command)

        assert result.exit_code == 0
        assert result.signal is None
        assert result.trimmed_output == EXPECTED_OUTPUT
        assert "GLib" not in result.stdout

    def test_launch_nonzero_exit(self, smoke_config):
        command = LaunchCommand(
            executable=Path(sys.executable), args=["-c", "import sys; sys.exit(3)"]
        )
        result = AppLauncher(smoke_config).launch(command)
        assert result.exit_code == 3

    def test_launch_missing_executable(self, smoke_config, tmp_path: Path):
        command = LaunchCommand(executable=tmp_path / "missing" / "hello-world")
        with pytest.raises(LaunchError):
            AppLauncher(smoke_config).launch(command)

    def test_launch_timeout(self, smoke_config):
        smoke_config.timeouts.launch_sec = 1
        command = LaunchCommand(
            executable=Path(sys.executable), args=["-c", "import time; time.sleep(30)"]
        )
        with pytest.raises(LaunchError):
            AppLauncher(smoke_config).launch(command)

    @posix_only
    def test_launch_resolved_linux_app(self, smoke_config, tmp_path: Path):
        app_dir = tmp_path / "hello-world"
        app_dir.mkdir()
        exe = app_dir / "hello-world"
        exe.write_text(app_script(), encoding="utf-8")
        exe.chmod(0o755)

        launcher = AppLauncher(smoke_config)
        result = launcher.launch(launcher.resolve(Platform.LINUX, app_dir))

        assert result.exit_code == 0
        assert result.trimmed_output == EXPECTED_OUTPUT
