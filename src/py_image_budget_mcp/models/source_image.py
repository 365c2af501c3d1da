"""源图像模型。"""

from pydantic import BaseModel, ConfigDict, Field


class SourceImage(BaseModel):
    """一次压缩调用独占的输入图像，构建后不可变"""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False, description="原始字节流")
    name: str = Field(description="原始文件名")
    media_type: str | None = Field(None, description="声明的媒体类型")
    byte_size: int = Field(ge=0, description="原始字节数")
    width: int = Field(gt=0, description="解码后的像素宽度")
    height: int = Field(gt=0, description="解码后的像素高度")

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.width, self.height
