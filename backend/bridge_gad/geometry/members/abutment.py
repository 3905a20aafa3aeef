"""
桥台生成器

简化模式：桥端外侧矩形（基准标高 → 梁底；梁底不高于基准时自墩基础顶起）
详细模式（toward_bridge 镜像左右台）：
    1. 台帽矩形（桥面顶向下 cap_depth，位于桥端外侧 cap_width 范围）
    2. 台前两段放坡：先 (0.15 / 1.0)，再水平 0.45 斜至基础顶
       （datum - 2.0，顶标高较低时随转折点下移）
    3. 台背竖直至基础顶
    4. 基础矩形：台背后 heel_projection 至台前底 toe_projection + 背墙厚度
"""

from __future__ import annotations

from ...interfaces import GeometryError
from ...models import (
    AbutmentMember,
    AbutmentPosition,
    GeometryEntity,
    LayerTag,
    StructuralLevels,
)
from .base import EntityFactory


class AbutmentBuilder:
    """桥台生成器"""

    def __init__(self, factory: EntityFactory):
        self.factory = factory
        self.config = factory.catalog.abutment

    def simple(
        self, abutment: AbutmentPosition, levels: StructuralLevels
    ) -> tuple[list[GeometryEntity], AbutmentMember]:
        width = self.config.simple.width
        edge = abutment.chainage
        outer = edge - abutment.toward_bridge * width
        top = levels.soffit_level
        # 梁底不高于基准标高时，台身落至墩基础顶
        base = levels.datum if top > levels.datum else levels.foundation_level
        if top - base <= 0:
            raise GeometryError(f"{abutment.side}桥台高度非正: top={top}, base={base}")

        entities: list[GeometryEntity] = [
            self.factory.rectangle(outer, base, edge, top, LayerTag.ABUTMENT)
        ]
        member = AbutmentMember(
            side=abutment.side,
            chainage=edge,
            top_level=top,
            base_level=base,
            outer_chainage=outer,
        )
        return entities, member

    def detailed(
        self, abutment: AbutmentPosition, levels: StructuralLevels
    ) -> tuple[list[GeometryEntity], AbutmentMember]:
        f = self.factory
        cfg = self.config.detailed
        t = abutment.toward_bridge
        edge = abutment.chainage

        cap_top = levels.deck_level
        cap_bottom = cap_top - cfg.cap_depth
        back_x = edge - t * cfg.cap_width

        # 台前第一段放坡
        step_x = edge + t * cfg.first_batter_dx
        step_y = cap_bottom - cfg.first_batter_dy

        # 基础顶至少低于放坡转折点一段放坡高度
        footing_top = min(levels.datum - cfg.footing_top_offset, step_y - cfg.first_batter_dy)
        footing_bottom = footing_top - cfg.footing_depth
        if step_y <= footing_top:
            raise GeometryError(
                f"{abutment.side}桥台放坡台身高度不足: step={step_y}, footing_top={footing_top}"
            )

        # 台前第二段放坡至基础顶
        face_x = step_x + t * cfg.second_batter_dx

        heel_x = back_x - t * cfg.heel_projection
        toe_x = face_x + t * (cfg.toe_projection + cfg.dirt_wall_thickness)

        entities: list[GeometryEntity] = [
            f.rectangle(back_x, cap_bottom, edge, cap_top, LayerTag.ABUTMENT),
            f.line((edge, cap_bottom), (step_x, step_y), LayerTag.ABUTMENT),
            f.line((step_x, step_y), (face_x, footing_top), LayerTag.ABUTMENT),
            f.line((back_x, cap_bottom), (back_x, footing_top), LayerTag.ABUTMENT),
            f.rectangle(heel_x, footing_bottom, toe_x, footing_top, LayerTag.FOUNDATION),
        ]
        member = AbutmentMember(
            side=abutment.side,
            chainage=edge,
            top_level=cap_top,
            base_level=footing_bottom,
            outer_chainage=heel_x,
        )
        return entities, member

    def plan(
        self, member: AbutmentMember, centre: float, half_width: float
    ) -> list[GeometryEntity]:
        """平面：台身外缘至桥端，横桥向与桥面同宽"""
        return [
            self.factory.rectangle(
                member.outer_chainage,
                centre - half_width,
                member.chainage,
                centre + half_width,
                LayerTag.ABUTMENT,
            )
        ]
