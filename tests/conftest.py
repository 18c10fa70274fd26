"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(smoke_config, fake_packager_cmd):
        smoke_config.packager.command = fake_packager_cmd
"""

from __future__ import annotations

import io
import sys
import tarfile
import textwrap
import zipfile
from pathlib import Path

import pytest

from package_smoke.config import SmokeConfig
from package_smoke.interfaces import IDiskImageTool
from package_smoke.models import Platform

EXPECTED_OUTPUT = "console.log: Hello, World!"
APP_NAME = "hello-world"

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="需要 /bin/sh")


def app_script(output: str = EXPECTED_OUTPUT, exit_code: int = 0) -> str:
    """伪造的应用可执行文件（shell脚本）"""
    return f"#!/bin/sh\necho '{output}'\nexit {exit_code}\n"


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """打包命令工作目录"""
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def smoke_config(project_dir: Path) -> SmokeConfig:
    """指向临时项目目录的运行期配置"""
    return SmokeConfig(
        product_name="qbrt-test",
        project_dir=project_dir,
        platform=Platform.LINUX,
    )


# ============================================================================
# 安装包 Fixtures
# ============================================================================

def build_tgz(dist_dir: Path, script: str = app_script()) -> Path:
    """生成 dist/hello-world.tgz（含 hello-world/hello-world）"""
    dist_dir.mkdir(parents=True, exist_ok=True)
    archive = dist_dir / f"{APP_NAME}.tgz"
    data = script.encode("utf-8")
    with tarfile.open(archive, "w:gz") as tf:
        folder = tarfile.TarInfo(APP_NAME)
        folder.type = tarfile.DIRTYPE
        folder.mode = 0o755
        tf.addfile(folder)
        exe = tarfile.TarInfo(f"{APP_NAME}/{APP_NAME}")
        exe.size = len(data)
        exe.mode = 0o755
        tf.addfile(exe, io.BytesIO(data))
    return archive


def build_zip(dist_dir: Path) -> Path:
    """生成 dist/hello-world.zip（含运行时与 application.ini）"""
    dist_dir.mkdir(parents=True, exist_ok=True)
    archive = dist_dir / f"{APP_NAME}.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        exe = zipfile.ZipInfo(f"{APP_NAME}/firefox.exe")
        exe.external_attr = 0o755 << 16
        zf.writestr(exe, b"MZ")
        zf.writestr(f"{APP_NAME}/qbrt/application.ini", "[App]\nName=hello-world\n")
    return archive


def fake_packager_cmd(output: str = EXPECTED_OUTPUT) -> list[str]:
    """伪造的打包命令：在 cwd/dist 下生成 hello-world.tgz"""
    code = textwrap.dedent(
        f"""
        import io, sys, tarfile
        from pathlib import Path

        assert sys.argv[1:] == ["package", "test/hello-world/"], sys.argv
        print("packaging hello-world")
        dist = Path("dist")
        dist.mkdir(exist_ok=True)
        data = {app_script(output)!r}.encode("utf-8")
        with tarfile.open(dist / "hello-world.tgz", "w:gz") as tf:
            folder = tarfile.TarInfo("hello-world")
            folder.type = tarfile.DIRTYPE
            folder.mode = 0o755
            tf.addfile(folder)
            exe = tarfile.TarInfo("hello-world/hello-world")
            exe.size = len(data)
            exe.mode = 0o755
            tf.addfile(exe, io.BytesIO(data))
        print("wrote dist/hello-world.tgz")
        """
    )
    return [sys.executable, "-c", code]


class FakeDiskImageTool(IDiskImageTool):
    """伪造的 hdiutil：attach 时在挂载点生成 .app 包"""

    def __init__(
        self,
        attach_code: int = 0,
        detach_code: int = 0,
        script: str = app_script(),
        with_app: bool = True,
    ):
        self.attach_code = attach_code
        self.with_app = with_app
        self.detach_code = detach_code
        self.script = script
        self.calls: list[tuple[str, Path]] = []

    def attach(self, image: Path, mountpoint: Path) -> int:
        self.calls.append(("attach", mountpoint))
        if self.attach_code == 0 and not self.with_app:
            mountpoint.mkdir(parents=True)
        elif self.attach_code == 0:
            macos_dir = mountpoint / f"{APP_NAME}.app" / "Contents" / "MacOS"
            macos_dir.mkdir(parents=True)
            exe = macos_dir / APP_NAME
            exe.write_text(self.script, encoding="utf-8")
            exe.chmod(0o755)
        return self.attach_code

    def detach(self, mountpoint: Path) -> int:
        self.calls.append(("detach", mountpoint))
        return self.detach_code


@pytest.fixture
def fake_disk_image() -> FakeDiskImageTool:
    return FakeDiskImageTool()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """模拟临时工作区"""
    path = tmp_path / "workspace"
    path.mkdir()
    return path
