"""
结构构造参数目录加载器 - 读取 structural_catalog.yaml

职责：
- 集中管理所有构件尺寸经验值（盖梁/墩身/承台/放坡/桥台台阶等）
- 集中管理图层/颜色/线宽表与标注尺寸
- 缓存加载结果（避免重复解析）

说明：
    构件尺寸为固定经验值，与 ParameterSet 无关；简化/详细、立面/平面
    所有绘制路径都从同一个 StructuralCatalog 取值，不在调用处重复声明。

使用方式：
    catalog = load_catalog()
    catalog.pier.detailed.batter_ratio      # 8.0
    catalog.get_layer_style("PIER").color   # 4
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

DEFAULT_CATALOG_PATH = Path(__file__).with_name("structural_catalog.yaml")


class SpanConfig(BaseModel):
    """布跨配置"""
    nominal_span: float = 30.0


class DeckConfig(BaseModel):
    """桥面/上部结构配置（m）"""
    level_below_top: float = 1.5     # 桥面顶 = toprl - 1.5
    thickness: float = 0.8
    parapet_height: float = 1.2
    width: float = 12.0              # 平面总宽
    roadway_width: float = 7.5       # 行车道宽


class SimplePierConfig(BaseModel):
    """简化桥墩（矩形）"""
    width: float = 1.8
    footing_extra_width: float = 1.0
    footing_depth: float = 2.0


class DetailedPierConfig(BaseModel):
    """详细桥墩（盖梁+放坡墩身+承台）"""
    cap_width: float = 2.2
    cap_depth: float = 0.5
    stem_top_width: float = 1.8
    batter_ratio: float = 8.0        # 每侧内收 = 竖向高度 / batter_ratio
    footing_projection: float = 0.5  # 承台每侧外伸
    footing_min_width: float = 3.5
    footing_depth: float = 2.5


class PierConfig(BaseModel):
    """桥墩配置"""
    foundation_offset: float = 3.0   # 基础顶 = datum - 3.0
    plan_length: float = 8.0         # 平面横桥向长度
    simple: SimplePierConfig = Field(default_factory=SimplePierConfig)
    detailed: DetailedPierConfig = Field(default_factory=DetailedPierConfig)


class SimpleAbutmentConfig(BaseModel):
    """简化桥台（矩形）"""
    width: float = 2.5


class DetailedAbutmentConfig(BaseModel):
    """详细桥台（台帽+两段放坡台身+基础）"""
    cap_width: float = 1.5
    cap_depth: float = 1.2
    first_batter_dx: float = 0.15
    first_batter_dy: float = 1.0
    second_batter_dx: float = 0.45
    footing_top_offset: float = 2.0  # 基础顶 = datum - 2.0
    footing_depth: float = 1.5
    toe_projection: float = 0.6
    heel_projection: float = 0.6
    dirt_wall_thickness: float = 0.3


class AbutmentConfig(BaseModel):
    """桥台配置"""
    simple: SimpleAbutmentConfig = Field(default_factory=SimpleAbutmentConfig)
    detailed: DetailedAbutmentConfig = Field(default_factory=DetailedAbutmentConfig)


class AnnotationConfig(BaseModel):
    """尺寸标注配置（偏移为m，*_mm为图纸mm）"""
    overall_offset: float = 3.0
    span_offset: float = 1.5
    vertical_offset: float = 2.0
    vertical_step: float = 2.0
    decimals: int = 2
    text_height_mm: float = 2.5
    text_gap_mm: float = 1.0
    tick_size_mm: float = 1.5
    extension_overshoot_mm: float = 1.0


class GridConfig(BaseModel):
    """坐标轴/网格配置"""
    band_spacing_mm: float = 20.0
    overshoot_above: float = 0.5
    label_height_mm: float = 2.5
    title_offset_mm: float = 25.0
    level_label_offset_mm: float = 3.0


class CrossSectionConfig(BaseModel):
    """地面线断面配置"""
    grid_epsilon: float = 0.01
    tick_depth_mm: float = 2.0
    band_tick_mm: float = 2.0
    label_height_mm: float = 2.0


class PlanConfig(BaseModel):
    """平面图配置"""
    offset_below_datum_mm: float = 80.0


class StyleConfig(BaseModel):
    """文字/标注样式（对应STYLE命令）"""
    text_style: str = "Arial"
    font: str = "arial.ttf"
    dimstyle: str = "pmb100"
    arrow_size_mm: float = 1.5
    text_height_mm: float = 4.0
    extension_mm: float = 4.0
    extension_offset_mm: float = 4.0


class LayerStyle(BaseModel):
    """图层样式"""
    name: str
    color: int = 7
    lineweight: float = 0.25         # mm


def _default_layers() -> dict[str, LayerStyle]:
    return {
        "DECK": LayerStyle(name="BRIDGE_DECK", color=1, lineweight=0.8),
        "PIER": LayerStyle(name="PIER", color=4, lineweight=0.6),
        "FOUNDATION": LayerStyle(name="FOUNDATION", color=6, lineweight=0.8),
        "ABUTMENT": LayerStyle(name="ABUTMENT", color=5, lineweight=0.7),
        "PARAPET": LayerStyle(name="PARAPET", color=2, lineweight=0.5),
        "GRID": LayerStyle(name="GRID", color=8, lineweight=0.15),
        "DIMENSIONS": LayerStyle(name="DIMENSIONS", color=7, lineweight=0.25),
        "TEXT": LayerStyle(name="TEXT", color=7, lineweight=0.25),
        "CROSS_SECTION_GRID": LayerStyle(name="CS_GRID", color=8, lineweight=0.15),
        "CROSS_SECTION_PROFILE": LayerStyle(name="CROSS_SECTION", color=6, lineweight=0.6),
    }


class StructuralCatalog(BaseModel):
    """结构构造参数目录（structural_catalog.yaml 的结构化表示）"""
    schema_version: str = "1.0"

    span: SpanConfig = Field(default_factory=SpanConfig)
    deck: DeckConfig = Field(default_factory=DeckConfig)
    pier: PierConfig = Field(default_factory=PierConfig)
    abutment: AbutmentConfig = Field(default_factory=AbutmentConfig)
    annotation: AnnotationConfig = Field(default_factory=AnnotationConfig)
    grid: GridConfig = Field(default_factory=GridConfig)
    cross_section: CrossSectionConfig = Field(default_factory=CrossSectionConfig)
    plan: PlanConfig = Field(default_factory=PlanConfig)
    style: StyleConfig = Field(default_factory=StyleConfig)
    layers: dict[str, LayerStyle] = Field(default_factory=_default_layers)

    model_config = {"frozen": True}

    # === 便捷访问方法 ===

    def get_layer_style(self, tag: Any) -> LayerStyle:
        """按图层标签获取样式（未配置时回落到0层）"""
        key = getattr(tag, "value", tag)
        style = self.layers.get(str(key))
        if style is None:
            return LayerStyle(name="0")
        return style

    def iter_layer_styles(self) -> list[LayerStyle]:
        """所有图层样式（按名称去重，保持顺序）"""
        seen: dict[str, LayerStyle] = {}
        for style in self.layers.values():
            seen.setdefault(style.name, style)
        return list(seen.values())


class CatalogLoader:
    """构造参数目录加载器（缓存）"""

    @staticmethod
    @lru_cache(maxsize=4)
    def load(catalog_path: str | Path = DEFAULT_CATALOG_PATH) -> StructuralCatalog:
        """加载并缓存目录，文件不存在时使用内置默认值"""
        path = Path(catalog_path)
        if not path.exists():
            return StructuralCatalog()

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return StructuralCatalog(**data)

    @staticmethod
    def reload(catalog_path: str | Path = DEFAULT_CATALOG_PATH) -> StructuralCatalog:
        """强制重新加载（清除缓存）"""
        CatalogLoader.load.cache_clear()
        return CatalogLoader.load(catalog_path)


# 便捷函数
def load_catalog(catalog_path: str | Path | None = None) -> StructuralCatalog:
    """加载结构构造参数目录"""
    return CatalogLoader.load(catalog_path or DEFAULT_CATALOG_PATH)
