"""
绘图命令发射器 - 参数集 → 有序命令序列

发射顺序（固定）：
    SECTION → [STYLE] → [网格] → 构件（简化或详细，二选一；平面在立面之后）
    → [尺寸标注] → [地面线断面] → ENDSEC → EOF

所有点都经过 CoordinateTransformer.transform；文字高度按图纸mm换算，
文字旋转角叠加斜交角。

测试要点：
- test_sequence_markers: 首尾标记
- test_emission_order: 图层顺序
- test_deck_level: 桥面顶位于 vpos(toprl - 1.5)
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from ..config import StructuralCatalog, load_catalog
from ..config.runtime_config import DrawingConfig
from ..geometry import (
    CoordinateTransformer,
    CrossSectionProjector,
    DimensionAnnotator,
    GeometrySynthesizer,
    StructuralLayoutDeriver,
)
from ..interfaces import ICommandEmitter
from ..models import (
    CommandKind,
    CommandSequence,
    DrawingCommand,
    GeometryEntity,
    LineEntity,
    ParameterSet,
    PolygonEntity,
    RenderMode,
    TextEntity,
)

logger = logging.getLogger(__name__)


class DrawingOptions(BaseModel):
    """发射选项"""
    render_mode: RenderMode = RenderMode.SIMPLE
    include_style: bool = True
    include_grid: bool = True
    include_dimensions: bool = True
    include_plan: bool = False
    include_cross_section: bool = True
    units_per_metre: float = 1000.0

    @classmethod
    def from_config(cls, config: DrawingConfig, **overrides) -> DrawingOptions:
        data = {
            "render_mode": config.render_mode,
            "include_style": config.include_style,
            "include_grid": config.include_grid,
            "include_dimensions": config.include_dimensions,
            "include_plan": config.include_plan,
            "include_cross_section": config.include_cross_section,
            "units_per_metre": config.units_per_metre,
        }
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)


class DrawingCommandEmitter(ICommandEmitter):
    """命令发射实现"""

    def __init__(
        self,
        catalog: StructuralCatalog | None = None,
        options: DrawingOptions | None = None,
    ):
        self.catalog = catalog or load_catalog()
        self.options = options or DrawingOptions()
        self.deriver = StructuralLayoutDeriver(self.catalog)

    def emit(self, params: ParameterSet) -> CommandSequence:
        opts = self.options
        transformer = CoordinateTransformer(params, units_per_metre=opts.units_per_metre)
        synthesizer = GeometrySynthesizer(
            params, transformer, self.catalog, include_plan=opts.include_plan
        )

        layout = self.deriver.derive(params.left_chainage, params.right_chainage)
        geometry = synthesizer.synthesize(layout, opts.render_mode)

        sequence = CommandSequence()

        if opts.include_style:
            sequence.append(self._style_command(transformer))

        if opts.include_grid:
            self._emit_entities(sequence, synthesizer.synthesize_grid(), transformer)

        self._emit_entities(sequence, geometry.elevation, transformer)
        if opts.include_plan:
            self._emit_entities(sequence, geometry.plan, transformer)

        if opts.include_dimensions:
            annotator = DimensionAnnotator(transformer, self.catalog)
            for dim in annotator.annotate(geometry):
                self._emit_entities(sequence, annotator.to_entities(dim), transformer)

        if opts.include_cross_section and params.has_cross_section:
            projector = CrossSectionProjector(params, transformer, self.catalog)
            self._emit_entities(sequence, projector.project(params.cross_section), transformer)

        sequence.seal()
        logger.info(
            f"命令发射完成: mode={RenderMode(opts.render_mode).value}, "
            f"桥墩={layout.pier_count}, 命令数={len(sequence)}"
        )
        return sequence

    def _style_command(self, transformer: CoordinateTransformer) -> DrawingCommand:
        style = self.catalog.style
        to_drawing = transformer.paper_to_drawing
        return DrawingCommand(
            kind=CommandKind.STYLE,
            name=style.text_style,
            settings={
                "font": style.font,
                "dimstyle": style.dimstyle,
                "text_height": to_drawing(style.text_height_mm),
                "arrow_size": to_drawing(style.arrow_size_mm),
                "extension": to_drawing(style.extension_mm),
                "extension_offset": to_drawing(style.extension_offset_mm),
            },
        )

    def _emit_entities(
        self,
        sequence: CommandSequence,
        entities: list[GeometryEntity],
        transformer: CoordinateTransformer,
    ) -> None:
        for entity in entities:
            sequence.extend(self.entity_commands(entity, transformer))

    def entity_commands(
        self, entity: GeometryEntity, transformer: CoordinateTransformer
    ) -> list[DrawingCommand]:
        """单个实体 → 命令（多边形展开为首尾相接的直线）"""
        layer = self.catalog.get_layer_style(entity.layer).name
        common = {"layer": layer, "color": entity.color, "lineweight": entity.lineweight}

        if isinstance(entity, LineEntity):
            edges = [(entity.p1, entity.p2)]
        elif isinstance(entity, PolygonEntity):
            edges = entity.edges()
        elif isinstance(entity, TextEntity):
            return [
                DrawingCommand(
                    kind=CommandKind.TEXT,
                    position=transformer.transform(entity.position),
                    text=entity.text,
                    height=transformer.paper_to_drawing(entity.height),
                    rotation=transformer.text_rotation(entity.rotation),
                    **common,
                )
            ]
        else:
            raise TypeError(f"未知实体类型: {type(entity).__name__}")

        return [
            DrawingCommand(
                kind=CommandKind.LINE,
                start=transformer.transform(p1),
                end=transformer.transform(p2),
                **common,
            )
            for p1, p2 in edges
        ]
