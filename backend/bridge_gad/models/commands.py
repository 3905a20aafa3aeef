"""
绘图命令模型 - 交给下游矢量图编码器的逻辑命令流

不变量：
- 序列以段开始标记(SECTION)开头，以结束标记(EOF)结尾
- 只能追加；封闭(seal)后不可再追加
- 编码器只能消费一次
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..interfaces import EncodingError
from .geometry import BBox, Point


class CommandKind(str, Enum):
    """命令类型"""
    SECTION_START = "SECTION"
    STYLE = "STYLE"
    LINE = "LINE"
    TEXT = "TEXT"
    SECTION_END = "ENDSEC"
    TERMINATOR = "EOF"


MARKER_KINDS = frozenset(
    {CommandKind.SECTION_START, CommandKind.SECTION_END, CommandKind.TERMINATOR}
)


class DrawingCommand(BaseModel):
    """单条绘图命令（图纸坐标）"""
    kind: CommandKind
    layer: str = "0"
    color: int = 7
    lineweight: float = 0.25

    # LINE
    start: Point | None = None
    end: Point | None = None

    # TEXT
    position: Point | None = None
    text: str | None = None
    height: float | None = None
    rotation: float = 0.0

    # STYLE / SECTION
    name: str | None = None
    settings: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def points(self) -> list[Point]:
        if self.kind == CommandKind.LINE and self.start and self.end:
            return [self.start, self.end]
        if self.kind == CommandKind.TEXT and self.position:
            return [self.position]
        return []


class CommandSequence:
    """只追加的有序命令序列"""

    def __init__(self, section: str = "ENTITIES") -> None:
        self._commands: list[DrawingCommand] = [
            DrawingCommand(kind=CommandKind.SECTION_START, name=section)
        ]
        self._sealed = False
        self._consumed = False

    def append(self, command: DrawingCommand) -> None:
        """追加一条命令"""
        if self._sealed:
            raise EncodingError("命令序列已封闭，不能追加")
        if command.kind in MARKER_KINDS:
            raise EncodingError(f"标记命令不能直接追加: {command.kind.value}")
        self._commands.append(command)

    def extend(self, commands: Iterable[DrawingCommand]) -> None:
        for command in commands:
            self.append(command)

    def seal(self) -> None:
        """写入段结束与终止标记"""
        if self._sealed:
            return
        self._commands.append(DrawingCommand(kind=CommandKind.SECTION_END))
        self._commands.append(DrawingCommand(kind=CommandKind.TERMINATOR))
        self._sealed = True

    def consume(self) -> tuple[DrawingCommand, ...]:
        """交给编码器（只能一次）"""
        if not self._sealed:
            raise EncodingError("命令序列未封闭")
        if self._consumed:
            raise EncodingError("命令序列已被消费")
        self._consumed = True
        return tuple(self._commands)

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def consumed(self) -> bool:
        return self._consumed

    @property
    def commands(self) -> tuple[DrawingCommand, ...]:
        """只读视图（不计为消费）"""
        return tuple(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[DrawingCommand]:
        return iter(tuple(self._commands))

    def of_kind(self, kind: CommandKind) -> list[DrawingCommand]:
        return [c for c in self._commands if c.kind == kind]

    def on_layer(self, layer: str) -> list[DrawingCommand]:
        return [c for c in self._commands if c.layer == layer and c.kind not in MARKER_KINDS]

    def extents(self) -> BBox | None:
        """所有LINE/TEXT点的外包框"""
        points: list[Point] = []
        for command in self._commands:
            points.extend(command.points())
        return BBox.from_points(points)
