"""
构件生成子模块 - 桥面、桥墩、桥台

子模块：
- base: 带图层样式的实体工厂
- deck: 桥面板/栏杆/平面轮廓
- pier: 简化/详细桥墩
- abutment: 简化/详细桥台
"""

from .abutment import AbutmentBuilder
from .base import EntityFactory
from .deck import DeckBuilder
from .pier import PierBuilder

__all__ = [
    "EntityFactory",
    "DeckBuilder",
    "PierBuilder",
    "AbutmentBuilder",
]
