"""工具模块包。

提供纯工具函数，不包含业务逻辑。
"""

from .file_helpers import (
    expand_input_paths,
    find_image_files,
    read_image_inputs,
)
from .logging_helpers import get_logger, setup_logging
from .message_formatter import MessageFormatter
from .naming_helpers import PathResolver, write_result


__all__ = [
    "MessageFormatter",
    "PathResolver",
    "expand_input_paths",
    "find_image_files",
    "get_logger",
    "read_image_inputs",
    "setup_logging",
    "write_result",
]
