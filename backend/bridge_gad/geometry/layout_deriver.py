"""
布跨推导器 - 桥长 → 桥墩/桥台位置

规则：
    pierCount = max(0, floor(L / nominalSpan) - 1)
    spacing   = L / (pierCount + 1)
    pier i    = left + spacing * i   (i = 1..pierCount)

立面、平面、尺寸标注共用同一推导结果，不在各处重复计算。
"""

from __future__ import annotations

import logging
import math

from ..config import StructuralCatalog, load_catalog
from ..interfaces import GeometryError, ILayoutDeriver
from ..models import AbutmentPosition, LayoutResult, PierPosition

logger = logging.getLogger(__name__)


class StructuralLayoutDeriver(ILayoutDeriver):
    """布跨推导实现（纯函数）"""

    def __init__(self, catalog: StructuralCatalog | None = None):
        self.catalog = catalog or load_catalog()
        self.nominal_span = self.catalog.span.nominal_span

    def derive(self, left: float, right: float) -> LayoutResult:
        length = right - left
        if not math.isfinite(length) or length <= 0:
            raise GeometryError(f"桥长必须为正: left={left}, right={right}")
        if self.nominal_span <= 0:
            raise GeometryError(f"标准跨径必须为正: {self.nominal_span}")

        pier_count = max(0, math.floor(length / self.nominal_span) - 1)
        piers: list[PierPosition] = []
        if pier_count > 0:
            spacing = length / (pier_count + 1)
            piers = [
                PierPosition(index=i, chainage=left + spacing * i)
                for i in range(1, pier_count + 1)
            ]

        abutments = (
            AbutmentPosition(side="LEFT", chainage=left),
            AbutmentPosition(side="RIGHT", chainage=right),
        )
        boundaries = (left, *(p.chainage for p in piers), right)

        logger.debug(f"布跨推导: L={length}, 桥墩数={pier_count}")
        return LayoutResult(
            left=left,
            right=right,
            nominal_span=self.nominal_span,
            piers=tuple(piers),
            abutments=abutments,
            span_boundaries=boundaries,
        )
