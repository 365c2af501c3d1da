"""图像压缩处理引擎模块。

包含批量处理、并发执行和配置构建等处理逻辑。
"""

from .batch import BatchProcessor
from .concurrent_executor import BatchTask, ConcurrentExecutor
from .config import ConfigBuilder, build_config


__all__ = [
    "BatchProcessor",
    "BatchTask",
    "ConcurrentExecutor",
    "ConfigBuilder",
    "build_config",
]
