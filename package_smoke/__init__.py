"""
qbrt 打包冒烟测试 - 核心模块

模块结构：
- config/     运行期配置加载
- models/     数据模型定义（平台/结果/运行记录）
- pipeline/   流水线编排（打包/解包/启动/校验/清理）
- process     子进程流式执行
- cli         命令行入口
"""

__version__ = "0.1.0"
