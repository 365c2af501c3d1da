"""尺寸策略模块。

在不放大的前提下按比例把图像限制在最大宽高内。
"""


def compute_dimensions(
    source_width: int, source_height: int, max_width: int, max_height: int
) -> tuple[int, int]:
    """计算输出尺寸，保持宽高比

    Args:
        source_width: 原始宽度
        source_height: 原始高度
        max_width: 最大宽度
        max_height: 最大高度

    Returns:
        tuple[int, int]: 输出宽高，均不小于 1
    """
    # 零尺寸按 1 像素处理
    source_width = max(1, source_width)
    source_height = max(1, source_height)

    # 已在范围内，不放大
    if source_width <= max_width and source_height <= max_height:
        return source_width, source_height

    ratio = min(max_width / source_width, max_height / source_height)
    width = round(source_width * ratio)
    height = round(source_height * ratio)

    # 极端宽高比时较短一边可能被舍入为 0
    return (
        min(max(1, width), max_width),
        min(max(1, height), max_height),
    )
