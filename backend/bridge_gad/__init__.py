"""
桥梁总体布置图(GAD)生成系统 - 后端核心模块

模块结构：
- config/     运行期配置与结构构造参数目录
- models/     数据模型定义（参数集/布跨/几何实体/绘图命令）
- ingest/     输入解析（文本/Excel）
- geometry/   坐标变换、布跨推导、构件几何、尺寸标注、断面投影
- drawing/    绘图命令发射与DXF编码
- pipeline/   流水线编排与任务管理
- cli.py      命令行入口
"""

__version__ = "0.1.0"
