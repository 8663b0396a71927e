"""
Chess Pro 源代码模块

包含子系统：
- chinese_chess_engine: 象棋规则与搜索引擎
"""

from . import chinese_chess_engine

__all__ = [
    "chinese_chess_engine",
]
