"""
构件生成器基类 - 按目录图层表生成带样式的实体
"""

from __future__ import annotations

from ...config import StructuralCatalog
from ...models import LayerTag, LineEntity, Point, PolygonEntity, TextEntity


class EntityFactory:
    """实体工厂：图层颜色/线宽统一取自目录"""

    def __init__(self, catalog: StructuralCatalog):
        self.catalog = catalog

    def line(self, p1: Point, p2: Point, layer: LayerTag) -> LineEntity:
        style = self.catalog.get_layer_style(layer)
        return LineEntity(
            layer=layer, color=style.color, lineweight=style.lineweight, p1=p1, p2=p2
        )

    def polygon(self, vertices: list[Point], layer: LayerTag, closed: bool = True) -> PolygonEntity:
        style = self.catalog.get_layer_style(layer)
        return PolygonEntity(
            layer=layer,
            color=style.color,
            lineweight=style.lineweight,
            vertices=tuple(vertices),
            closed=closed,
        )

    def rectangle(
        self, x1: float, y1: float, x2: float, y2: float, layer: LayerTag
    ) -> PolygonEntity:
        """轴对齐矩形（任意两对角点）"""
        xmin, xmax = min(x1, x2), max(x1, x2)
        ymin, ymax = min(y1, y2), max(y1, y2)
        return self.polygon([(xmin, ymin), (xmax, ymin), (xmax, ymax), (xmin, ymax)], layer)

    def text(
        self,
        position: Point,
        text: str,
        layer: LayerTag = LayerTag.TEXT,
        height: float = 2.5,
        rotation: float = 0.0,
    ) -> TextEntity:
        style = self.catalog.get_layer_style(layer)
        return TextEntity(
            layer=layer,
            color=style.color,
            lineweight=style.lineweight,
            position=position,
            text=text,
            height=height,
            rotation=rotation,
        )
