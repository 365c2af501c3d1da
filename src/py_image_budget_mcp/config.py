"""统一配置管理模块。

提供应用程序的全局配置管理，包括默认值、环境变量支持等。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class CompressionDefaults:
    """压缩相关的默认配置"""

    # 尺寸上限
    MAX_WIDTH: int = 1920
    MAX_HEIGHT: int = 1080

    # 字节预算 - 100KB
    MAX_BYTES: int = 100 * 1024

    # 质量搜索
    SEARCH_ITERATIONS: int = 10
    MIN_QUALITY: float = 0.0
    MAX_QUALITY: float = 1.0

    # 输出编码
    OUTPUT_FORMAT: str = "WEBP"
    WEBP_METHOD: int = 4  # 6 最慢，每次探测都要完整编码一次

    # 并发设置
    MAX_WORKERS: int = 4


@dataclass(frozen=True)
class ProcessingDefaults:
    """处理相关的默认配置"""

    # 目录扫描
    RECURSIVE: bool = True
    EXCLUDE_DIRS: tuple[str, ...] = (
        "output",
        ".venv",
        "node_modules",
        ".git",
        "__pycache__",
    )

    # 输入文件大小上限
    MAX_FILE_SIZE_MB: float = 100.0


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    # 日志级别
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 文件日志
    ENABLE_FILE_LOGGING: bool = False
    LOG_FILE_PATH: str = "py_image_budget.log"
    LOG_FILE_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_FILE_BACKUP_COUNT: int = 5


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.compression = CompressionDefaults()
        self.processing = ProcessingDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        # 压缩配置
        if max_width := os.getenv("PIB_MAX_WIDTH"):
            object.__setattr__(self.compression, "MAX_WIDTH", int(max_width))

        if max_height := os.getenv("PIB_MAX_HEIGHT"):
            object.__setattr__(self.compression, "MAX_HEIGHT", int(max_height))

        if max_bytes := os.getenv("PIB_MAX_BYTES"):
            object.__setattr__(self.compression, "MAX_BYTES", int(max_bytes))

        if iterations := os.getenv("PIB_SEARCH_ITERATIONS"):
            object.__setattr__(self.compression, "SEARCH_ITERATIONS", int(iterations))

        if output_format := os.getenv("PIB_OUTPUT_FORMAT"):
            object.__setattr__(
                self.compression, "OUTPUT_FORMAT", output_format.upper()
            )

        if webp_method := os.getenv("PIB_WEBP_METHOD"):
            object.__setattr__(self.compression, "WEBP_METHOD", int(webp_method))

        if max_workers := os.getenv("PIB_MAX_WORKERS"):
            object.__setattr__(self.compression, "MAX_WORKERS", int(max_workers))

        # 日志配置
        if log_level := os.getenv("PIB_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        if enable_file_log := os.getenv("PIB_ENABLE_FILE_LOGGING"):
            object.__setattr__(
                self.logging,
                "ENABLE_FILE_LOGGING",
                enable_file_log.lower() in ("true", "1", "yes"),
            )


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
