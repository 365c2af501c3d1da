"""质量搜索模块。

对编码质量做固定步数的二分搜索，寻找输出不超过字节预算的最高质量。
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..exceptions import ValidationError
from ..utils.logging_helpers import get_logger


logger = get_logger()
A = TypeVar("A")

EncodeFn = Callable[[float], tuple[A, int]]


@dataclass(frozen=True)
class SearchOutcome(Generic[A]):
    """质量搜索结果"""

    quality: float
    size: int
    artifact: A
    budget_met: bool
    encode_calls: int


def find_best_quality(
    encode_fn: EncodeFn,
    lower: float,
    upper: float,
    max_bytes: int,
    max_iterations: int,
) -> SearchOutcome:
    """在 [lower, upper] 内二分搜索满足字节预算的最高质量

    假设质量越高输出越大，但不做校验。循环总是跑满 max_iterations 步，
    即使第一次探测就已满足预算，也继续向 upper 逼近。

    若没有任何探测满足预算，则在最终的下界重新编码一次并返回，
    此时 budget_met 为 False，结果可能仍超出预算。

    Args:
        encode_fn: 接收质量值，返回 (编码产物, 字节数)
        lower: 质量下界
        upper: 质量上界
        max_bytes: 字节预算
        max_iterations: 探测步数

    Returns:
        SearchOutcome: 最佳质量、大小、产物及是否满足预算

    Raises:
        ValidationError: 参数无效
    """
    if max_iterations < 1:
        raise ValidationError(f"搜索步数必须大于 0，当前值: {max_iterations}")
    if lower > upper:
        raise ValidationError(f"质量下界不能大于上界: {lower} > {upper}")
    if max_bytes < 1:
        raise ValidationError(f"字节预算必须大于 0，当前值: {max_bytes}")

    lo, hi = lower, upper
    best: tuple[float, int, object] | None = None
    calls = 0

    for step in range(max_iterations):
        mid = (lo + hi) / 2
        artifact, size = encode_fn(mid)
        calls += 1

        if size <= max_bytes:
            best = (mid, size, artifact)
            lo = mid
        else:
            hi = mid

        logger.debug(
            f"质量探测 {step + 1}/{max_iterations}: quality={mid:.6f}, "
            f"size={size}, {'命中' if size <= max_bytes else '超出'}预算"
        )

    if best is None:
        artifact, size = encode_fn(lo)
        calls += 1
        logger.debug(f"无探测满足预算，回退到 quality={lo:.6f}, size={size}")
        return SearchOutcome(
            quality=lo,
            size=size,
            artifact=artifact,
            budget_met=False,
            encode_calls=calls,
        )

    quality, size, artifact = best
    return SearchOutcome(
        quality=quality,
        size=size,
        artifact=artifact,
        budget_met=True,
        encode_calls=calls,
    )
