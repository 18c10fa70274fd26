"""
输出校验器 - 校验应用退出码与输出文本
"""

from __future__ import annotations

from ..config import SmokeConfig, get_config
from ..interfaces import VerificationError
from ..models import LaunchResult


class LaunchVerifier:
    """启动结果校验"""

    def __init__(self, config: SmokeConfig | None = None):
        config = config or get_config()
        self.expected_output = config.launch.expected_output

    def verify(self, result: LaunchResult) -> None:
        """退出码必须为0，去除首尾空白后的输出必须完全一致"""
        if result.exit_code != 0:
            raise VerificationError(
                f"应用退出码非0: {result.exit_code} (signal={result.signal})"
            )
        if result.trimmed_output != self.expected_output:
            raise VerificationError(
                f"应用输出不符: 期望 {self.expected_output!r}, 实际 {result.trimmed_output!r}"
            )
