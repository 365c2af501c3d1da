"""配置构建器模块。

统一的压缩配置构建逻辑，集成参数验证功能。
"""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..config import CompressionDefaults, get_config
from ..exceptions import ValidationError as CustomValidationError
from ..models.compression_config import CompressionConfig


logger = logging.getLogger(__name__)

CONFIG_FIELDS = frozenset(CompressionConfig.model_fields)


class ConfigBuilder:
    """压缩配置构建器

    以全局默认值（含环境变量覆盖）为底，叠加调用方参数。
    """

    def __init__(self, defaults: CompressionDefaults | None = None):
        """初始化配置构建器

        Args:
            defaults: 默认配置，None 时每次构建读取全局配置
        """
        self._defaults = defaults

    @property
    def defaults(self) -> CompressionDefaults:
        return self._defaults or get_config().compression

    def build(
        self, base: CompressionConfig | None = None, **overrides: Any
    ) -> CompressionConfig:
        """构建压缩配置

        Args:
            base: 基础配置，None 时使用默认值
            **overrides: 要覆盖的字段，值为 None 的项被忽略

        Returns:
            CompressionConfig: 构建的配置对象

        Raises:
            CustomValidationError: 参数验证失败或出现未知字段
        """
        unknown = set(overrides) - CONFIG_FIELDS
        if unknown:
            raise CustomValidationError(f"未知的配置项: {', '.join(sorted(unknown))}")

        values = base.model_dump() if base is not None else self._default_values()
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return CompressionConfig(**values)
        except PydanticValidationError as e:
            error_msg = self._format_validation_error(e)
            logger.warning(f"配置验证失败: {error_msg}")
            raise CustomValidationError(error_msg) from e

    def _default_values(self) -> dict[str, Any]:
        defaults = self.defaults
        return {
            "max_width": defaults.MAX_WIDTH,
            "max_height": defaults.MAX_HEIGHT,
            "max_bytes": defaults.MAX_BYTES,
            "quality_search_iterations": defaults.SEARCH_ITERATIONS,
            "min_quality": defaults.MIN_QUALITY,
            "max_quality": defaults.MAX_QUALITY,
        }

    def _format_validation_error(self, error: PydanticValidationError) -> str:
        """格式化验证错误"""
        messages = []
        for err in error.errors():
            field = ".".join(str(loc) for loc in err["loc"])
            msg = err["msg"]
            if field:
                messages.append(f"{field}: {msg}")
            else:
                messages.append(msg)
        return "; ".join(messages)


# 全局配置构建器实例
_default_builder = ConfigBuilder()


def build_config(**kwargs: Any) -> CompressionConfig:
    """便捷的配置构建函数

    Args:
        **kwargs: 配置参数

    Returns:
        CompressionConfig: 构建的配置对象
    """
    return _default_builder.build(**kwargs)
