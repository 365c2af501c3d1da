"""图像压缩异常处理模块。

定义统一的异常类和错误处理机制，包含编解码异常转换装饰器。
"""

from collections.abc import Callable
from functools import wraps
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .models.compression_result import ItemOutcome
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


# 统一的异常类型
class CompressionError(Exception):
    """压缩相关错误基类"""

    def __init__(self, message: str, name: str | None = None):
        super().__init__(message)
        self.message = message
        self.name = name


class ValidationError(CompressionError):
    """参数验证错误 - 统一的验证错误类型"""

    pass


class DecodeError(CompressionError):
    """输入字节无法解码为图像"""

    pass


class EncodeError(CompressionError):
    """编码器本身出错"""

    pass


class BatchCancelledError(CompressionError):
    """批次已取消，任务未执行"""

    pass


def handle_codec_errors(
    operation_name: str, error_cls: type[CompressionError]
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """把 Pillow 抛出的异常统一转换为 error_cls

    已经是 CompressionError 的异常原样抛出。

    Args:
        operation_name: 操作名称，用于日志记录
        error_cls: 转换后的异常类型
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except CompressionError:
                raise
            except UnidentifiedImageError as e:
                logger.debug(f"{operation_name} - 无法识别图像格式: {e}")
                raise error_cls(f"无法识别的图像格式: {e}") from e
            except DecompressionBombError as e:
                logger.debug(f"{operation_name} - 图像过大: {e}")
                raise error_cls(f"图像像素过多，可能存在安全风险: {e}") from e
            except (OSError, ValueError, TypeError, SyntaxError) as e:
                # Pillow 的截断/损坏数据可能抛出 SyntaxError
                logger.debug(f"{operation_name} - 处理失败: {e}")
                raise error_cls(f"{operation_name}失败: {e}") from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    把单个输入的异常转换为失败的 ItemOutcome，并记录日志。
    """

    @staticmethod
    def _log_error(
        operation: str, name: str, error: Exception, level: str = "error"
    ) -> None:
        """标准化的错误日志记录

        Args:
            operation: 操作名称（如"图像压缩"、"批量任务"等）
            name: 相关文件名
            error: 异常对象
            level: 日志级别 ("error", "warning", "debug")
        """
        log_msg = MessageFormatter.format_error(operation, name, error)
        getattr(logger, level, logger.error)(log_msg)

    @staticmethod
    def create_failed_outcome(
        index: int,
        name: str,
        error: Exception,
        cancelled: bool = False,
    ) -> ItemOutcome:
        """创建标准化的失败结果"""
        message = error.message if isinstance(error, CompressionError) else str(error)
        return ItemOutcome(
            index=index,
            name=name,
            success=False,
            result=None,
            error=message,
            error_type=type(error).__name__,
            cancelled=cancelled,
        )

    @staticmethod
    def handle_item_error(
        error: Exception, index: int, name: str, operation: str = "图像压缩"
    ) -> ItemOutcome:
        """按错误类型分级记录日志并生成失败结果"""
        match error:
            case BatchCancelledError():
                ErrorHandler._log_error(operation, name, error, "debug")
                return ErrorHandler.create_failed_outcome(
                    index, name, error, cancelled=True
                )
            case DecodeError() | ValidationError():
                ErrorHandler._log_error(operation, name, error, "warning")
            case EncodeError():
                ErrorHandler._log_error(f"{operation} - 编码错误", name, error, "error")
            case _:
                ErrorHandler._log_error(f"{operation} - 未知错误", name, error, "error")
        return ErrorHandler.create_failed_outcome(index, name, error)
