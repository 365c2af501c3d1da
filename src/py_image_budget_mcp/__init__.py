"""按字节预算压缩图像的 Python 库。

把图像缩放到最大宽高内，并二分搜索编码质量，使 WebP 输出不超过字节预算。
"""

__version__ = "0.1.0"
__author__ = "crper"
__description__ = "按字节预算压缩图像，基于 Pillow 11"

# 核心功能导出
from .compressor import ImageCompressor, compress_batch
from .core import compress, compute_dimensions, find_best_quality
from .exceptions import CompressionError, DecodeError, EncodeError, ValidationError
from .models import (
    BatchReport,
    CompressionConfig,
    CompressionResult,
    CompressionTotals,
    ItemOutcome,
)


__all__ = [
    "BatchReport",
    "CompressionConfig",
    "CompressionError",
    "CompressionResult",
    "CompressionTotals",
    "DecodeError",
    "EncodeError",
    "ImageCompressor",
    "ItemOutcome",
    "ValidationError",
    "compress",
    "compress_batch",
    "compute_dimensions",
    "find_best_quality",
    "get_version",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
