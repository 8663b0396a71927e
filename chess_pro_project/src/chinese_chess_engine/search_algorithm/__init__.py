"""
搜索算法模块

包含 Alpha-Beta 搜索和局面评估。
"""

from .evaluator import BoardEvaluator, PIECE_VALUES
from .alpha_beta_searcher import AlphaBetaSearcher, SearchResult, SearchStats, find_best_move

__all__ = [
    'BoardEvaluator', 'PIECE_VALUES',
    'AlphaBetaSearcher', 'SearchResult', 'SearchStats', 'find_best_move'
]
