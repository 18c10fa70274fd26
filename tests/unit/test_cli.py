"""
命令行入口单元测试
"""

import json
import sys
from pathlib import Path

import pytest
import yaml

from package_smoke import cli

from conftest import fake_packager_cmd, posix_only


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    """避免测试中替换全局日志处理器"""
    calls = []
    monkeypatch.setattr(cli, "configure_logging", lambda *args: calls.append(args))
    return calls


def _write_config(tmp_path: Path, command: list[str]) -> Path:
    path = tmp_path / "smoke.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "smoke_options": {
                    "product_name": "qbrt-cli",
                    "packager": {"command": command},
                    "logging": {"log_level": "DEBUG"},
                }
            }
        ),
        encoding="utf-8",
    )
    return path


class TestMain:
    """命令行测试"""

    @posix_only
    def test_success_exit_code(self, tmp_path: Path, project_dir: Path, _no_logging_setup):
        config_path = _write_config(tmp_path, fake_packager_cmd())
        report = tmp_path / "report.json"

        code = cli.main(
            [
                "--config", str(config_path),
                "--project-dir", str(project_dir),
                "--platform", "linux",
                "--report", str(report),
            ]
        )

        assert code == 0
        assert json.loads(report.read_text(encoding="utf-8"))["status"] == "succeeded"
        assert _no_logging_setup == [("DEBUG", None)]

    def test_failure_exit_code(self, tmp_path: Path, project_dir: Path, capsys):
        config_path = _write_config(tmp_path, [sys.executable, "-c", "import sys; sys.exit(2)"])

        code = cli.main(
            ["--config", str(config_path), "--project-dir", str(project_dir), "--platform", "linux"]
        )

        assert code == 1
        assert "FAILED" in capsys.readouterr().out

    @posix_only
    def test_expected_output_override(self, tmp_path: Path, project_dir: Path):
        config_path = _write_config(tmp_path, fake_packager_cmd())

        code = cli.main(
            [
                "--config", str(config_path),
                "--project-dir", str(project_dir),
                "--platform", "linux",
                "--expected-output", "something else",
            ]
        )

        assert code == 1

    def test_invalid_platform(self):
        with pytest.raises(SystemExit):
            cli.main(["--platform", "beos"])
