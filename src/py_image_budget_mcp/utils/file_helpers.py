"""文件工具模块。

查找图像文件并读取为批量压缩的输入。
"""

from collections.abc import Iterable, Iterator
from pathlib import Path

from ..models.constants import ImageFormats, guess_media_type, is_image_media_type
from .logging_helpers import get_logger
from .message_formatter import MessageFormatter


logger = get_logger()


def find_image_files(
    directory: str | Path,
    recursive: bool = True,
    exclude_dirs: Iterable[str] | None = None,
) -> Iterator[Path]:
    """查找目录中的图像文件。

    Args:
        directory: 搜索目录
        recursive: 是否递归搜索子目录
        exclude_dirs: 要排除的目录名列表

    Yields:
        Path: 图像文件路径
    """
    directory = Path(directory)
    exclude_dirs = set(exclude_dirs or [])

    if not directory.is_dir():
        logger.warning(MessageFormatter.operation_failed("搜索图像文件", directory))
        return

    pattern = "**/*" if recursive else "*"
    supported_extensions = ImageFormats.get_supported_extensions()

    for file_path in sorted(directory.glob(pattern)):
        if (
            file_path.is_file()
            and file_path.suffix.lower() in supported_extensions
            and not exclude_dirs.intersection(file_path.relative_to(directory).parts)
        ):
            yield file_path


def expand_input_paths(
    paths: Iterable[str | Path],
    recursive: bool = True,
    exclude_dirs: Iterable[str] | None = None,
    max_file_size_mb: float | None = None,
) -> list[Path]:
    """展开文件和目录为图像文件列表，非图像文件和超出大小上限的文件被跳过

    Args:
        paths: 文件或目录路径
        recursive: 目录是否递归
        exclude_dirs: 目录中要排除的子目录名
        max_file_size_mb: 单个文件大小上限（MB），None 表示不限制

    Returns:
        list[Path]: 图像文件路径，保持输入顺序

    Raises:
        FileNotFoundError: 路径不存在
    """
    files: list[Path] = []
    for raw_path in paths:
        path = Path(raw_path)
        if path.is_dir():
            files.extend(find_image_files(path, recursive, exclude_dirs))
        elif path.is_file():
            if is_image_media_type(guess_media_type(path.name)):
                files.append(path)
            else:
                logger.info(MessageFormatter.not_an_image(path))
        else:
            raise FileNotFoundError(MessageFormatter.file_not_found(path))

    if max_file_size_mb is None:
        return files

    limit = max_file_size_mb * 1024 * 1024
    accepted = []
    for file_path in files:
        if file_path.stat().st_size > limit:
            logger.warning(
                MessageFormatter.file_too_large(file_path, max_file_size_mb)
            )
        else:
            accepted.append(file_path)
    return accepted


def read_image_inputs(
    files: Iterable[Path],
) -> list[tuple[bytes, str, str | None]]:
    """读取文件为 (字节流, 文件名, 媒体类型) 输入"""
    return [
        (file_path.read_bytes(), file_path.name, guess_media_type(file_path.name))
        for file_path in files
    ]
