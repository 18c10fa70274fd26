"""
流水线执行器 - 编排各阶段执行

职责：
1. 按顺序执行各阶段（打包 -> 解包 -> 启动 -> 校验）
2. 任一阶段失败立即中止，错误只在顶层捕获一次并记录
3. 无论成败，临时工作区都会被删除
4. 可选：输出运行报告 JSON

测试要点：
- test_execute_full_pipeline: 完整流水线执行
- test_packaging_failure_aborts: 打包失败中止且清理
- test_output_mismatch: 输出不符
"""

from __future__ import annotations

import json
import logging

from ..config import SmokeConfig, get_config
from ..interfaces import (
    IAppLauncher,
    IArtifactExtractor,
    IPackagerRunner,
    PackageSmokeError,
)
from ..models import Platform, SmokeRun
from .extractor import ArtifactExtractor
from .launcher import AppLauncher
from .packager import PackagerRunner
from .stages import SMOKE_STAGES, PipelineStage, StageEnum
from .verifier import LaunchVerifier
from .workspace import TempWorkspace

logger = logging.getLogger(__name__)


class SmokeTestExecutor:
    """流水线执行器"""

    def __init__(
        self,
        config: SmokeConfig | None = None,
        packager: IPackagerRunner | None = None,
        extractor: IArtifactExtractor | None = None,
        launcher: IAppLauncher | None = None,
    ):
        self.config = config or get_config()
        self.packager = packager or PackagerRunner(self.config)
        self.extractor = extractor or ArtifactExtractor(self.config)
        self.launcher = launcher or AppLauncher(self.config)
        self.verifier = LaunchVerifier(self.config)

    def execute(self, run: SmokeRun | None = None) -> SmokeRun:
        """执行流水线，返回运行记录（不抛出异常）"""
        run = run or SmokeRun()
        workspace = TempWorkspace(self.config.product_name)

        try:
            run.platform = self.config.platform or Platform.detect()
            run.workspace = workspace.create()
            run.mark_running()
            logger.info(f"[{run.run_id}] 平台: {run.platform.value}")

            for stage in SMOKE_STAGES:
                self._execute_stage(run, stage)

            run.mark_succeeded()

        except PackageSmokeError as e:
            logger.error(f"[{run.run_id}] 阶段失败 {run.stage}: {e}")
            run.mark_failed(str(e))
        except Exception as e:
            logger.exception(f"[{run.run_id}] 流水线异常: {run.stage}")
            run.mark_failed(f"{type(e).__name__}: {e}")

        finally:
            logger.info(f"[{run.run_id}] 收尾清理")
            try:
                workspace.cleanup()
            except OSError as e:
                logger.error(f"[{run.run_id}] 临时工作区删除失败: {e}")
                run.mark_failed(f"临时工作区删除失败: {e}")
            run.workspace_removed = workspace.removed
            self._persist_report(run)

        logger.info(f"[{run.run_id}] 结果: {run.status.value}")
        return run

    def _execute_stage(self, run: SmokeRun, stage: PipelineStage) -> None:
        """执行单个阶段"""
        run.stage = stage.name
        logger.info(f"[{run.run_id}] 开始阶段: {stage.name} ({stage.description})")

        if stage.name == StageEnum.PACKAGE.value:
            run.packaging = self.packager.run()

        elif stage.name == StageEnum.EXTRACT.value:
            run.extracted = self.extractor.extract(run.platform, run.workspace)

        elif stage.name == StageEnum.LAUNCH.value:
            command = self.launcher.resolve(run.platform, run.extracted.app_dir)
            run.launch = self.launcher.launch(command)

        elif stage.name == StageEnum.VERIFY.value:
            self.verifier.verify(run.launch)

        logger.info(f"[{run.run_id}] 完成阶段: {stage.name}")

    def _persist_report(self, run: SmokeRun) -> None:
        report_path = self.config.report_path
        if not report_path:
            return
        report_path.parent.mkdir(parents=True, exist_ok=True)
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(run.model_dump(mode="json"), f, ensure_ascii=False, indent=2, default=str)
