"""
布跨模型 - 桥墩/桥台/跨界位置

LayoutResult 是 (left, right, nominal_span) 的纯函数结果，无持久标识；
桩号范围变化时重新推导。
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class PierPosition(BaseModel):
    """桥墩位置"""
    index: int = Field(..., description="墩号（从1开始）")
    chainage: float

    model_config = {"frozen": True}


class AbutmentPosition(BaseModel):
    """桥台位置"""
    side: Literal["LEFT", "RIGHT"]
    chainage: float

    model_config = {"frozen": True}

    @property
    def toward_bridge(self) -> int:
        """朝向桥跨的方向（+1向右，-1向左）"""
        return 1 if self.side == "LEFT" else -1


class LayoutResult(BaseModel):
    """布跨推导结果"""
    left: float
    right: float
    nominal_span: float
    piers: tuple[PierPosition, ...] = Field(default_factory=tuple)
    abutments: tuple[AbutmentPosition, ...] = Field(default_factory=tuple)
    span_boundaries: tuple[float, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @property
    def bridge_length(self) -> float:
        return self.right - self.left

    @property
    def pier_count(self) -> int:
        return len(self.piers)

    @property
    def span_count(self) -> int:
        return len(self.span_boundaries) - 1

    @property
    def pier_chainages(self) -> list[float]:
        return [p.chainage for p in self.piers]

    def iter_spans(self) -> list[tuple[float, float]]:
        """相邻跨界 (起, 止) 对，从left到right"""
        b = self.span_boundaries
        return [(b[i], b[i + 1]) for i in range(len(b) - 1)]
