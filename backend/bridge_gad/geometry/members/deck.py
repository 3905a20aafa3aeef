"""
上部结构生成器 - 桥面板/栏杆（立面）与桥面平面轮廓
"""

from __future__ import annotations

from ...models import GeometryEntity, LayerTag, LayoutResult, StructuralLevels
from .base import EntityFactory


class DeckBuilder:
    """桥面生成器"""

    def __init__(self, factory: EntityFactory):
        self.factory = factory
        self.config = factory.catalog.deck

    def elevation(self, layout: LayoutResult, levels: StructuralLevels) -> list[GeometryEntity]:
        """立面：桥面板矩形 + 栏杆顶线及两端立柱"""
        f = self.factory
        left, right = layout.left, layout.right
        return [
            f.rectangle(left, levels.soffit_level, right, levels.deck_level, LayerTag.DECK),
            f.line(
                (left, levels.parapet_level), (right, levels.parapet_level), LayerTag.PARAPET
            ),
            f.line((left, levels.deck_level), (left, levels.parapet_level), LayerTag.PARAPET),
            f.line((right, levels.deck_level), (right, levels.parapet_level), LayerTag.PARAPET),
        ]

    def plan(self, layout: LayoutResult, centre: float) -> list[GeometryEntity]:
        """平面：桥面外轮廓、行车道边线、中心线"""
        f = self.factory
        left, right = layout.left, layout.right
        half = self.config.width / 2
        road = self.config.roadway_width / 2
        return [
            f.rectangle(left, centre - half, right, centre + half, LayerTag.DECK),
            f.line((left, centre - road), (right, centre - road), LayerTag.PARAPET),
            f.line((left, centre + road), (right, centre + road), LayerTag.PARAPET),
            f.line((left, centre), (right, centre), LayerTag.GRID),
        ]
