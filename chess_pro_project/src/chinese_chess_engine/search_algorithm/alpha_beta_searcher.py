"""
Alpha-Beta 搜索器

固定深度的极小化极大搜索，带 Alpha-Beta 剪枝和吃子优先的走法排序。
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import List, Optional

from .evaluator import BoardEvaluator, PIECE_VALUES
from ..config.engine_config import SearchConfig
from ..rules_engine import ChessBoard, Move, PieceColor
from ..utils.exceptions import SearchDepthError
from ..utils.logger import performance_logger


@dataclass
class SearchStats:
    """单次搜索的统计信息"""
    depth: int = 0
    nodes: int = 0
    cutoffs: int = 0
    time_used: float = 0.0


@dataclass
class SearchResult:
    """搜索结果"""
    best_move: Optional[Move]
    score: float
    stats: SearchStats = field(default_factory=SearchStats)


class AlphaBetaSearcher:
    """
    Alpha-Beta 搜索器

    搜索只在棋盘副本上进行，不修改调用方的棋盘。
    统计信息保存在每次调用的局部对象中，同一个搜索器可以在多个线程中
    分别搜索不同的棋盘。
    """

    def __init__(self, config: Optional[SearchConfig] = None,
                 evaluator: Optional[BoardEvaluator] = None):
        """
        初始化搜索器

        Args:
            config: 搜索配置
            evaluator: 局面评估器，为None时按配置创建
        """
        self.config = config or SearchConfig()
        self.evaluator = evaluator or BoardEvaluator(self.config)
        self.logger = logging.getLogger(__name__)

    def find_best_move(self, board: ChessBoard,
                       max_depth: Optional[int] = None) -> Optional[Move]:
        """
        寻找最佳走法

        Args:
            board: 当前棋盘
            max_depth: 搜索深度，None表示使用配置中的深度

        Returns:
            Optional[Move]: 最佳走法，当前玩家没有合法走法时返回None
        """
        return self.search(board, max_depth).best_move

    def search(self, board: ChessBoard, max_depth: Optional[int] = None) -> SearchResult:
        """
        执行搜索

        深度0与深度1相同，都只比较每个走法走后的静态评分。

        Args:
            board: 当前棋盘
            max_depth: 搜索深度

        Returns:
            SearchResult: 最佳走法、评分和统计信息
        """
        depth = self.config.max_depth if max_depth is None else max_depth
        if depth < 0:
            raise SearchDepthError(depth)

        start_time = time.time()
        stats = SearchStats(depth=depth)
        scratch = board.copy()
        root_color = scratch.current_player

        # 缺少帅/将的导入局面已经终局，不再给出走法
        moves = [] if scratch.status.is_terminal else self.order_moves(scratch.legal_moves())
        stats.nodes += 1
        if not moves:
            score = self._terminal_score(scratch, root_color, 0)
            stats.time_used = time.time() - start_time
            self.logger.debug(f"{root_color.display_name}没有合法走法，搜索结束")
            return SearchResult(None, score, stats)

        best_move = None
        best_score = -math.inf
        alpha = -math.inf
        for move in moves:
            scratch._push(move)
            try:
                score = self._alpha_beta(scratch, max(depth - 1, 0), alpha, math.inf,
                                         1, root_color, stats)
            finally:
                scratch.undo_move()

            # 分数相同时保留先找到的走法
            if best_move is None or score > best_score:
                best_move = move
                best_score = score
            alpha = max(alpha, score)

        stats.time_used = time.time() - start_time
        if self.config.log_statistics:
            performance_logger.log_search_stats(depth, stats.nodes, stats.cutoffs, stats.time_used)
        self.logger.debug(f"最佳走法: {best_move}, 评分: {best_score}")

        return SearchResult(best_move, best_score, stats)

    def _alpha_beta(self, board: ChessBoard, depth: int, alpha: float, beta: float,
                    ply: int, root_color: PieceColor, stats: SearchStats) -> float:
        """
        递归搜索

        Args:
            board: 搜索用的棋盘副本
            depth: 剩余深度
            alpha: 下界
            beta: 上界
            ply: 距根节点的步数
            root_color: 调用搜索的一方
            stats: 统计信息

        Returns:
            float: 从 root_color 视角的评分
        """
        stats.nodes += 1
        captured_general_score = self._captured_general_score(board, root_color, ply)
        if captured_general_score is not None:
            return captured_general_score

        if depth == 0:
            return self.evaluator.evaluate(board, root_color)

        moves = self.order_moves(board.legal_moves())
        if not moves:
            return self._terminal_score(board, root_color, ply)

        maximizing = board.current_player is root_color
        value = -math.inf if maximizing else math.inf

        for move in moves:
            board._push(move)
            try:
                score = self._alpha_beta(board, depth - 1, alpha, beta, ply + 1, root_color, stats)
            finally:
                board.undo_move()

            if maximizing:
                value = max(value, score)
                alpha = max(alpha, value)
            else:
                value = min(value, score)
                beta = min(beta, value)

            if alpha >= beta:
                stats.cutoffs += 1
                break

        return value

    def _captured_general_score(self, board: ChessBoard, root_color: PieceColor,
                                ply: int) -> Optional[float]:
        """
        帅/将被吃掉时的评分，与规则引擎的终局判定一致

        只有导入的不完整局面才可能走到这一步。

        Returns:
            Optional[float]: 双方帅/将都在时返回None
        """
        root_general = board.find_general(root_color)
        enemy_general = board.find_general(root_color.opponent)
        if root_general is not None and enemy_general is not None:
            return None
        if root_general is None and enemy_general is None:
            return 0
        mate = self.config.mate_score - ply
        return mate if root_general is not None else -mate

    def _terminal_score(self, board: ChessBoard, root_color: PieceColor, ply: int) -> float:
        """
        无合法走法时的评分

        被将死（或困毙判负）时按步数调整，越快的杀棋分数越高。
        """
        side_to_move = board.current_player
        rule_engine = board.rule_engine
        if rule_engine.is_in_check(board, side_to_move) or rule_engine.stalemate_is_loss:
            mate = self.config.mate_score - ply
            return -mate if side_to_move is root_color else mate
        return 0

    def order_moves(self, moves: List[Move]) -> List[Move]:
        """
        走法排序：吃子优先（先吃价值高的子，再用价值低的子去吃），其余保持生成顺序

        Args:
            moves: 走法列表

        Returns:
            List[Move]: 排序后的走法列表
        """
        if not self.config.capture_first:
            return moves

        captures = [move for move in moves if move.is_capture]
        if not captures:
            return moves
        quiet = [move for move in moves if not move.is_capture]
        captures.sort(key=lambda move: (-PIECE_VALUES[move.captured_piece.type],
                                        PIECE_VALUES[move.piece.type]))
        return captures + quiet


def find_best_move(board: ChessBoard, max_depth: int,
                   config: Optional[SearchConfig] = None) -> Optional[Move]:
    """
    寻找最佳走法的便捷函数

    Args:
        board: 当前棋盘
        max_depth: 搜索深度
        config: 搜索配置

    Returns:
        Optional[Move]: 最佳走法，没有合法走法时返回None
    """
    return AlphaBetaSearcher(config).find_best_move(board, max_depth)
