"""
运行期配置 - 读取 config/package_smoke.yaml

职责：
- 加载打包命令/安装包/启动/超时/日志等运行参数
- 提供环境变量覆盖机制（前缀 PKGSMOKE_，嵌套分隔符 __，优先于YAML）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from ..models import Platform


class PackagerConfig(BaseModel):
    """打包命令配置"""

    command: list[str] = Field(default_factory=lambda: ["node", "bin/cli.js"])
    subcommand: str = "package"
    source_dir: str = "test/hello-world/"


class ArtifactConfig(BaseModel):
    """安装包配置"""

    dist_dir: str = "dist"
    app_name: str = "hello-world"


class LaunchConfig(BaseModel):
    """应用启动配置"""

    expected_output: str = "console.log: Hello, World!"
    windows_runtime: str = "firefox.exe"
    windows_app_ini: str = "qbrt/application.ini"


class DiskImageConfig(BaseModel):
    """磁盘映像工具配置（仅macOS）"""

    exe_path: str = "hdiutil"
    mount_dir_name: str = "volume"


class TimeoutConfig(BaseModel):
    """超时配置（None 表示一直等待）"""

    packager_sec: int | None = None
    launch_sec: int | None = None
    disk_image_sec: int | None = None


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_file: str | None = None


class SmokeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    # 基础参数
    product_name: str = "qbrt"
    project_dir: Path = Path(".")
    platform: Platform | None = None  # 为空时按宿主平台识别
    report_path: Path | None = None

    # 各子配置
    packager: PackagerConfig = Field(default_factory=PackagerConfig)
    artifacts: ArtifactConfig = Field(default_factory=ArtifactConfig)
    launch: LaunchConfig = Field(default_factory=LaunchConfig)
    disk_image: DiskImageConfig = Field(default_factory=DiskImageConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "PKGSMOKE_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """优先级：环境变量 > 构造参数（YAML） > 默认值"""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> SmokeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        opts = data.get("smoke_options", {})
        top_level = {
            k: opts[k]
            for k in ("product_name", "project_dir", "platform", "report_path")
            if opts.get(k) is not None
        }

        # 以字典传入，便于与环境变量按字段合并
        config = cls(
            packager=cls._extract(opts, "packager"),
            artifacts=cls._extract(opts, "artifacts"),
            launch=cls._extract(opts, "launch"),
            disk_image=cls._extract(opts, "disk_image"),
            timeouts=cls._extract(opts, "timeouts"),
            logging=cls._extract(opts, "logging"),
            **top_level,
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if not self.project_dir.is_absolute():
            self.project_dir = (base_dir / self.project_dir).resolve()
        if self.report_path and not self.report_path.is_absolute():
            self.report_path = (base_dir / self.report_path).resolve()
        if self.logging.log_file:
            log_file = Path(self.logging.log_file)
            if not log_file.is_absolute():
                self.logging.log_file = str((base_dir / log_file).resolve())

    def get_dist_dir(self) -> Path:
        """获取安装包输出目录"""
        return self.project_dir / self.artifacts.dist_dir

    def get_packager_cmd(self, source_dir: str | None = None) -> list[str]:
        """拼装打包命令"""
        return [
            *self.packager.command,
            self.packager.subcommand,
            source_dir or self.packager.source_dir,
        ]


# 全局配置实例
_config: SmokeConfig | None = None

DEFAULT_CONFIG_PATH = Path("config/package_smoke.yaml")


def get_config() -> SmokeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = SmokeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> SmokeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = SmokeConfig.from_yaml(path)
    return _config
