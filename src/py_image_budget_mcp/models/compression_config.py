"""压缩配置模型。

定义预算压缩的配置参数和校验规则。
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import ImageFormats, ValidationLimits, get_format_alias


class CompressionConfig(BaseModel):
    """预算压缩配置，构建后不可变"""

    model_config = ConfigDict(frozen=True)

    # 尺寸上限
    max_width: int = Field(1920, gt=0, description="最大宽度")
    max_height: int = Field(1080, gt=0, description="最大高度")

    # 字节预算
    max_bytes: int = Field(100 * 1024, gt=0, description="输出最大字节数")

    # 质量搜索
    quality_search_iterations: int = Field(10, gt=0, description="质量搜索步数上限")
    min_quality: float = Field(0.0, ge=0.0, le=1.0, description="质量下界")
    max_quality: float = Field(1.0, ge=0.0, le=1.0, description="质量上界")

    @model_validator(mode="after")
    def validate_quality_range(self) -> "CompressionConfig":
        if self.min_quality >= self.max_quality:
            raise ValueError(
                f"min_quality 必须小于 max_quality，"
                f"当前: {self.min_quality} >= {self.max_quality}"
            )
        return self

    @field_validator("max_width", "max_height")
    @classmethod
    def validate_dimension_limit(cls, v: int) -> int:
        if v > ValidationLimits.MAX_DIMENSION:
            raise ValueError(f"尺寸超过限制 {ValidationLimits.MAX_DIMENSION}，得到: {v}")
        return v


# ============================================================================
# 验证器类 - 集中的参数验证逻辑
# ============================================================================


class CompressionValidators:
    """压缩相关的验证器集合"""

    @staticmethod
    def validate_output_format(format_str: str) -> str:
        """验证并标准化输出格式名称

        Args:
            format_str: 格式字符串

        Returns:
            str: 标准化的格式名称

        Raises:
            ValidationError: 格式为空或不是可用的有损格式
        """
        from ..exceptions import ValidationError

        if not format_str:
            raise ValidationError("格式不能为空")

        standard_format = get_format_alias(format_str)

        if standard_format not in ImageFormats.LOSSY_OUTPUT_FORMATS:
            available = sorted(ImageFormats.LOSSY_OUTPUT_FORMATS)
            raise ValidationError(
                f"不支持的输出格式: {format_str}。可用格式: {', '.join(available)}"
            )

        if standard_format not in ImageFormats.get_supported_formats():
            raise ValidationError(f"当前 Pillow 未启用 {standard_format} 编码支持")

        return standard_format
