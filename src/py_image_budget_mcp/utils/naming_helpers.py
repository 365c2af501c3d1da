"""文件命名工具模块。

把压缩结果写到磁盘时的路径生成功能。
"""

import itertools
from pathlib import Path

from ..models.compression_result import CompressionResult


class PathResolver:
    """路径解析器"""

    @staticmethod
    def resolve_output_path(result: CompressionResult, output_dir: Path) -> Path:
        """生成压缩结果的输出路径，已存在时追加数字后缀"""
        return PathResolver.ensure_unique_path(output_dir / result.get_download_name())

    @staticmethod
    def ensure_unique_path(path: Path) -> Path:
        """确保路径唯一，如果文件已存在则添加数字后缀

        Args:
            path: 原始路径

        Returns:
            Path: 唯一的路径
        """
        if not path.exists():
            return path

        base = path.stem
        suffix = path.suffix
        parent = path.parent

        for counter in itertools.count(1):
            new_path = parent / f"{base}_{counter}{suffix}"
            if not new_path.exists():
                return new_path

        return path  # pragma: no cover


def write_result(result: CompressionResult, output_dir: str | Path) -> Path:
    """把压缩后的字节流写入输出目录

    Args:
        result: 压缩结果
        output_dir: 输出目录，不存在时创建

    Returns:
        Path: 写入的文件路径
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = PathResolver.resolve_output_path(result, output_dir)
    output_path.write_bytes(result.compressed)
    return output_path
