"""
临时工作区 - 单次运行的所有中间文件与解包产物

在系统临时目录下创建，前缀取产品名；无论成功失败，运行结束时删除且只删除一次。

使用方式：
    with TempWorkspace("qbrt") as workspace:
        ...
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class TempWorkspace:
    """临时工作区（上下文管理器）"""

    def __init__(self, product_name: str, root: Path | None = None):
        self.prefix = f"{product_name}-"
        self.root = root
        self.path: Path | None = None
        self.removed = False

    def create(self) -> Path:
        self.path = Path(tempfile.mkdtemp(prefix=self.prefix, dir=self.root))
        logger.info(f"创建临时工作区: {self.path}")
        return self.path

    def cleanup(self) -> None:
        """递归删除工作区（可重复调用，目录不存在时不报错）"""
        if self.removed or self.path is None:
            return
        if self.path.exists():
            shutil.rmtree(self.path)
        self.removed = True
        logger.info(f"已删除临时工作区: {self.path}")

    def __enter__(self) -> Path:
        return self.create()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

