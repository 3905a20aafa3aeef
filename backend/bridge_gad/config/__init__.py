"""
配置层 - 加载运行期配置与结构构造参数目录

职责：
- 加载 documents/runtime.yaml（运行期参数）
- 加载 structural_catalog.yaml（构件尺寸经验值/图层表）
- 提供类型安全的配置访问接口
"""

from .catalog_loader import CatalogLoader, LayerStyle, StructuralCatalog, load_catalog
from .runtime_config import RuntimeConfig, get_config, reload_config

__all__ = [
    "CatalogLoader",
    "StructuralCatalog",
    "LayerStyle",
    "load_catalog",
    "RuntimeConfig",
    "get_config",
    "reload_config",
]
