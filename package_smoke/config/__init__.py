"""
配置层 - 加载运行期配置

职责：
- 加载 config/package_smoke.yaml（运行期参数）
- 提供环境变量覆盖机制
- 提供类型安全的配置访问接口
"""

from .runtime_config import SmokeConfig, get_config, reload_config

__all__ = [
    "SmokeConfig",
    "get_config",
    "reload_config",
]
