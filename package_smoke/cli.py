"""
命令行入口 - 运行打包冒烟测试

使用方式：
    python -m package_smoke --project-dir /path/to/qbrt
    package-smoke --config config/package_smoke.yaml --report out/smoke.json

退出码：全部通过为0，否则为1
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import SmokeConfig, reload_config
from .logging_utils import configure_logging
from .models import Platform
from .pipeline import SmokeTestExecutor


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="package-smoke",
        description="Package test/hello-world, unpack the installer, launch it and check its output.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="运行期配置YAML（默认：config/package_smoke.yaml）",
    )
    parser.add_argument("--project-dir", default=None, help="打包命令的工作目录")
    parser.add_argument(
        "--platform",
        choices=[p.value for p in Platform],
        default=None,
        help="覆盖宿主平台识别",
    )
    parser.add_argument("--source-dir", default=None, help="待打包的应用目录")
    parser.add_argument("--expected-output", default=None, help="期望的应用输出")
    parser.add_argument("--log-level", default=None, help="日志级别（默认取配置）")
    parser.add_argument("--report", default=None, help="可选：运行报告JSON输出路径")
    return parser


def _apply_overrides(config: SmokeConfig, args: argparse.Namespace) -> SmokeConfig:
    if args.project_dir:
        config.project_dir = Path(args.project_dir).resolve()
    if args.platform:
        config.platform = Platform(args.platform)
    if args.source_dir:
        config.packager.source_dir = args.source_dir
    if args.expected_output is not None:
        config.launch.expected_output = args.expected_output
    if args.log_level:
        config.logging.log_level = args.log_level
    if args.report:
        config.report_path = Path(args.report).resolve()
    return config


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    config = _apply_overrides(reload_config(args.config), args)
    log_file = Path(config.logging.log_file) if config.logging.log_file else None
    configure_logging(config.logging.log_level, log_file)

    run = SmokeTestExecutor(config).execute()
    for error in run.errors:
        print(f"FAILED: {error}")
    return run.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
