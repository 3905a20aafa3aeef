"""
参数集模型 - 10个标量输入 + 可选地面线断面

对应输入文件前10行：scale1, scale2, skew, datum, toprl, left, right, xincr, yincr, noch

约定：
- ParameterSet 只能通过 ParameterSet.build 构造（唯一的默认值合并入口）
- 构造后不可变；参数变化时用 with_changes 重新构造，派生常量随之重新计算
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..interfaces import ValidationError

# 缺省参数（与Excel模板Sheet1缺省值一致）
DEFAULT_PARAMETERS: dict[str, Any] = {
    "scale1": 100.0,
    "scale2": 50.0,
    "skew_degrees": 0.0,
    "datum": 0.0,
    "top_level": 20.0,
    "left_chainage": 0.0,
    "right_chainage": 100.0,
    "x_increment": 10.0,
    "y_increment": 2.0,
    "chainage_count": 10,
}

# 旧字段名 → 规范字段名
LEGACY_FIELD_NAMES: dict[str, str] = {
    "skew": "skew_degrees",
    "toprl": "top_level",
    "left": "left_chainage",
    "right": "right_chainage",
    "xincr": "x_increment",
    "yincr": "y_increment",
    "noch": "chainage_count",
    "crosssections": "cross_section",
    "cross_sections": "cross_section",
}

# 输入文件中10个标量的顺序
INPUT_FIELD_ORDER: tuple[str, ...] = (
    "scale1",
    "scale2",
    "skew_degrees",
    "datum",
    "top_level",
    "left_chainage",
    "right_chainage",
    "x_increment",
    "y_increment",
    "chainage_count",
)


class CrossSectionPoint(BaseModel):
    """地面线断面点"""
    chainage: float
    level: float

    model_config = {"frozen": True}


class DerivedConstants(BaseModel):
    """派生常量（每个参数集计算一次，不可变）"""
    vertical_scale_factor: float
    horizontal_scale_factor: float
    skew_radians: float
    skew_sin: float
    skew_cos: float
    scale_ratio: float

    model_config = {"frozen": True}

    @classmethod
    def from_parameters(
        cls, params: ParameterSet, units_per_metre: float = 1000.0
    ) -> DerivedConstants:
        skew_radians = math.radians(params.skew_degrees)
        return cls(
            vertical_scale_factor=units_per_metre,
            horizontal_scale_factor=units_per_metre,
            skew_radians=skew_radians,
            skew_sin=math.sin(skew_radians),
            skew_cos=math.cos(skew_radians),
            scale_ratio=params.scale1 / params.scale2,
        )


def normalize_field_names(raw: Mapping[str, Any]) -> dict[str, Any]:
    """字段名归一（兼容旧短名，大小写不敏感）"""
    result: dict[str, Any] = {}
    for key, value in raw.items():
        name = str(key).strip()
        lowered = name.lower()
        name = LEGACY_FIELD_NAMES.get(lowered, lowered)
        result[name] = value
    return result


def resolve_defaults(
    raw: Mapping[str, Any], defaults: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """单次默认值合并：先归一字段名，再用缺省值补齐缺失项"""
    values = dict(defaults if defaults is not None else DEFAULT_PARAMETERS)
    for key, value in normalize_field_names(raw).items():
        if value is None:
            continue
        values[key] = value
    return values


class ParameterSet(BaseModel):
    """桥梁绘图参数集"""
    scale1: float = Field(..., description="立面/平面比例分母")
    scale2: float = Field(..., description="断面比例分母")
    skew_degrees: float = Field(0.0, description="斜交角(度)")
    datum: float = Field(..., description="基准标高")
    top_level: float = Field(..., description="顶标高(toprl)")
    left_chainage: float = Field(..., description="起点桩号")
    right_chainage: float = Field(..., description="终点桩号")
    x_increment: float = Field(..., description="桩号网格间距")
    y_increment: float = Field(..., description="标高网格间距")
    chainage_count: int = Field(..., description="桩号数量(noch)")
    cross_section: tuple[CrossSectionPoint, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @field_validator("cross_section", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> Any:
        """(chainage, level) 二元组 → 断面点"""
        if value is None:
            return ()
        points = []
        for item in value:
            if isinstance(item, (list, tuple)) and len(item) == 2:
                points.append({"chainage": item[0], "level": item[1]})
            else:
                points.append(item)
        return points

    @field_validator("cross_section")
    @classmethod
    def _sort_points(cls, value: tuple[CrossSectionPoint, ...]) -> tuple[CrossSectionPoint, ...]:
        return tuple(sorted(value, key=lambda p: p.chainage))

    @property
    def bridge_length(self) -> float:
        return self.right_chainage - self.left_chainage

    @property
    def has_cross_section(self) -> bool:
        return len(self.cross_section) > 0

    @classmethod
    def build(cls, raw: Mapping[str, Any], *, fill_defaults: bool = True) -> ParameterSet:
        """
        唯一构造入口：默认值合并 → 类型转换 → 范围/顺序校验

        Raises:
            ValidationError: 携带字段名和非法值
        """
        values = resolve_defaults(raw) if fill_defaults else normalize_field_names(raw)

        for name in INPUT_FIELD_ORDER:
            if name not in values:
                raise ValidationError(name, None, "缺少必填参数")

        try:
            params = cls(**values)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first.get("loc", ())) or "parameters"
            raise ValidationError(field, first.get("input"), first.get("msg", "")) from e

        validate_parameters(params)
        return params

    def with_changes(self, **updates: Any) -> ParameterSet:
        """修改参数并重新构造（重新校验）"""
        data = self.model_dump()
        data.update(normalize_field_names(updates))
        return ParameterSet.build(data, fill_defaults=False)

    def derive_constants(self, units_per_metre: float = 1000.0) -> DerivedConstants:
        return DerivedConstants.from_parameters(self, units_per_metre)


def validate_parameters(params: ParameterSet) -> None:
    """范围/顺序不变量校验（任一失败即抛出，不产生部分输出）"""
    for name in INPUT_FIELD_ORDER:
        value = getattr(params, name)
        if not math.isfinite(value):
            raise ValidationError(name, value, "必须为有限数值")

    for name in ("scale1", "scale2"):
        if getattr(params, name) <= 0:
            raise ValidationError(name, getattr(params, name), "比例必须为正数")

    for name in ("x_increment", "y_increment"):
        if getattr(params, name) <= 0:
            raise ValidationError(name, getattr(params, name), "网格间距必须为正数")

    if params.chainage_count <= 0:
        raise ValidationError("chainage_count", params.chainage_count, "桩号数量必须为正整数")

    if params.right_chainage <= params.left_chainage:
        raise ValidationError("right_chainage", params.right_chainage, "终点桩号必须大于起点桩号")

    if params.top_level <= params.datum:
        raise ValidationError("top_level", params.top_level, "顶标高必须高于基准标高")

    for i, point in enumerate(params.cross_section):
        if not (math.isfinite(point.chainage) and math.isfinite(point.level)):
            raise ValidationError(f"cross_section[{i}]", (point.chainage, point.level), "必须为有限数值")
        if point.chainage < params.left_chainage or point.chainage > params.right_chainage:
            raise ValidationError(
                f"cross_section[{i}].chainage",
                point.chainage,
                f"超出桩号范围 [{params.left_chainage}, {params.right_chainage}]",
            )
