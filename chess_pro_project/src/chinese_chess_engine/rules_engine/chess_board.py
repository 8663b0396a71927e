"""
象棋棋盘数据结构

维护棋子摆放、轮到的玩家、走法历史和对局状态，支持走子与悔棋。
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np

from .constants import BOARD_COLS, BOARD_ROWS, CHINESE_COLUMNS, CHINESE_ROWS, GameStatus, PieceColor, PieceType
from .move import Move
from .piece import ChessPiece, standard_layout
from .position import Position
from .rule_engine import RuleEngine
from ..utils.logger import LoggerMixin


# 导入棋盘时接受的棋子描述：棋子对象或 (类型, 颜色, 位置) 三元组
PieceEntry = Union[ChessPiece, Tuple[PieceType, PieceColor, Position]]


@dataclass(frozen=True)
class MoveRecord:
    """走法历史记录，保存悔棋所需的全部信息"""
    move: Move
    captured_piece: Optional[ChessPiece]
    previous_status: Optional[GameStatus]


class ChessBoard(LoggerMixin):
    """
    象棋棋盘类

    棋盘以 位置 -> 棋子 的稀疏映射保存。所有修改操作要么完整生效，
    要么不改变棋盘；非法走法和空历史悔棋以返回 False 表示。
    """

    def __init__(self, pieces: Optional[Iterable[PieceEntry]] = None,
                 rule_engine: Optional[RuleEngine] = None):
        """
        初始化棋盘

        Args:
            pieces: 初始棋子列表，为None时使用标准初始局面
            rule_engine: 规则引擎，为None时使用默认规则
        """
        self.rule_engine = rule_engine or RuleEngine()

        self._pieces: Dict[Position, ChessPiece] = {}
        self._current_player = PieceColor.RED
        self._history: List[MoveRecord] = []
        # None 表示状态尚未计算（仅在搜索使用的私有副本上出现）
        self._status: Optional[GameStatus] = GameStatus.PLAYING

        if pieces is None:
            self.reset()
        else:
            self.set_position(pieces)

    # ==================== 查询接口 ====================

    @property
    def current_player(self) -> PieceColor:
        """当前轮到的玩家"""
        return self._current_player

    @property
    def status(self) -> GameStatus:
        """对局状态"""
        if self._status is None:
            self._status = self.rule_engine.compute_status(self)
        return self._status

    def piece_at(self, pos: Position) -> Optional[ChessPiece]:
        """
        获取指定位置的棋子

        Args:
            pos: 位置

        Returns:
            Optional[ChessPiece]: 棋子，空位返回None
        """
        return self._pieces.get(pos)

    def is_empty(self, pos: Position) -> bool:
        """检查指定位置是否为空"""
        return pos not in self._pieces

    def get_all_pieces(self, color: Optional[PieceColor] = None) -> List[ChessPiece]:
        """
        获取棋子列表

        按从上到下、从左到右的顺序返回，保证走法生成顺序确定。

        Args:
            color: 指定颜色，None表示全部棋子

        Returns:
            List[ChessPiece]: 棋子列表
        """
        pieces = [piece for piece in self._pieces.values()
                  if color is None or piece.color is color]
        pieces.sort(key=lambda piece: (piece.position.y, piece.position.x))
        return pieces

    def iter_pieces(self, color: Optional[PieceColor] = None) -> Iterator[ChessPiece]:
        """按任意顺序遍历棋子，用于不关心顺序的扫描"""
        return (piece for piece in self._pieces.values()
                if color is None or piece.color is color)

    def count_pieces(self, color: Optional[PieceColor] = None) -> Dict[PieceType, int]:
        """
        统计棋子数量

        Args:
            color: 指定颜色，None表示统计全部棋子

        Returns:
            Dict[PieceType, int]: {棋子类型: 数量}
        """
        counts: Dict[PieceType, int] = {}
        for piece in self._pieces.values():
            if color is None or piece.color is color:
                counts[piece.type] = counts.get(piece.type, 0) + 1
        return counts

    def find_general(self, color: PieceColor) -> Optional[Position]:
        """
        找到指定方帅/将的位置

        Args:
            color: 颜色

        Returns:
            Optional[Position]: 位置，找不到时返回None
        """
        for piece in self._pieces.values():
            if piece.type is PieceType.GENERAL and piece.color is color:
                return piece.position
        return None

    def legal_moves(self, color: Optional[PieceColor] = None) -> List[Move]:
        """
        获取合法走法列表

        Args:
            color: 指定颜色，None表示当前玩家

        Returns:
            List[Move]: 合法走法列表，顺序确定且无重复
        """
        return self.rule_engine.generate_legal_moves(self, color)

    def is_legal_move(self, move: Move) -> bool:
        """检查走法对当前玩家是否合法"""
        return self._find_legal_move(move) is not None

    def is_in_check(self, color: Optional[PieceColor] = None) -> bool:
        """检查指定方是否被将军"""
        return self.rule_engine.is_in_check(self, color or self._current_player)

    def move_count(self) -> int:
        """获取走法总数"""
        return len(self._history)

    @property
    def move_history(self) -> List[Move]:
        """已执行的走法列表"""
        return [record.move for record in self._history]

    def get_last_move(self) -> Optional[Move]:
        """获取最后一步走法"""
        return self._history[-1].move if self._history else None

    # ==================== 修改接口 ====================

    def make_move(self, move: Move) -> bool:
        """
        执行走法

        Args:
            move: 要执行的走法，只需起点、终点和棋子与某个合法走法一致

        Returns:
            bool: 是否执行成功；失败时棋盘保持不变
        """
        if self.status.is_terminal:
            self.log_debug(f"对局已结束({self.status.value})，拒绝走法: {move}")
            return False

        legal_move = self._find_legal_move(move)
        if legal_move is None:
            self.log_debug(f"非法走法: {move}")
            return False

        self._push(legal_move)
        self._status = self.rule_engine.compute_status(self)

        if self._status.is_terminal:
            self.log_info(f"对局结束: {self._status.value}，共{len(self._history)}步")
        return True

    def undo_move(self) -> bool:
        """
        撤销上一步走法

        Returns:
            bool: 是否撤销成功；历史为空时返回False
        """
        if not self._history:
            return False

        record = self._history.pop()
        self._restore(record.move, record.captured_piece)
        self._current_player = record.move.color
        self._status = record.previous_status
        return True

    def set_position(self, pieces: Iterable[PieceEntry],
                     current_player: PieceColor = PieceColor.RED) -> None:
        """
        整体替换棋盘上的棋子

        不做局面合法性检查；同一位置出现多个棋子时以最后一个为准。

        Args:
            pieces: 棋子列表
            current_player: 先走的一方，默认红方
        """
        placement: Dict[Position, ChessPiece] = {}
        for item in pieces:
            piece = item if isinstance(item, ChessPiece) else ChessPiece(*item)
            if piece.position in placement:
                self.log_warning(f"位置 {piece.position} 上有重复棋子，以最后一个为准")
            placement[piece.position] = piece

        self._pieces = placement
        self._history = []
        self._current_player = current_player
        self._status = self.rule_engine.compute_status(self)

    def reset(self) -> None:
        """重置到初始局面"""
        self.set_position(standard_layout())

    # ==================== 内部操作 ====================

    def _find_legal_move(self, move: Move) -> Optional[Move]:
        """在当前玩家的合法走法中查找与给定走法匹配的一项"""
        if move.piece.color is not self._current_player:
            return None
        if self._pieces.get(move.from_pos) != move.piece:
            return None
        for legal_move in self.rule_engine.generate_legal_moves(self, self._current_player):
            if legal_move == move:
                return legal_move
        return None

    def _displace(self, move: Move) -> Optional[ChessPiece]:
        """只移动棋子，返回目标位置上原有的棋子"""
        captured = self._pieces.pop(move.to_pos, None)
        del self._pieces[move.from_pos]
        self._pieces[move.to_pos] = move.moved_piece()
        return captured

    def _restore(self, move: Move, captured: Optional[ChessPiece]) -> None:
        """撤销 _displace 的效果"""
        del self._pieces[move.to_pos]
        self._pieces[move.from_pos] = move.piece
        if captured is not None:
            self._pieces[move.to_pos] = captured

    def _push(self, move: Move) -> None:
        """
        执行走法但不检查合法性、不计算对局状态

        只应作用于已知合法的走法，供搜索在私有副本上使用。
        """
        captured = self._displace(move)
        self._history.append(MoveRecord(move, captured, self._status))
        self._current_player = self._current_player.opponent
        self._status = None

    # ==================== 格式转换 ====================

    def to_matrix(self) -> np.ndarray:
        """
        转换为矩阵格式

        Returns:
            np.ndarray: 10x9 的整数矩阵，[y, x] 处为棋子编码，红正黑负，空位为0
        """
        matrix = np.zeros((BOARD_ROWS, BOARD_COLS), dtype=int)
        for pos, piece in self._pieces.items():
            matrix[pos.y, pos.x] = piece.code
        return matrix

    @classmethod
    def from_matrix(cls, matrix: np.ndarray,
                    current_player: PieceColor = PieceColor.RED,
                    rule_engine: Optional[RuleEngine] = None) -> 'ChessBoard':
        """
        从矩阵创建棋盘对象

        Args:
            matrix: 10x9 的棋盘矩阵
            current_player: 当前玩家
            rule_engine: 规则引擎

        Returns:
            ChessBoard: 棋盘对象
        """
        matrix = np.asarray(matrix)
        if matrix.shape != (BOARD_ROWS, BOARD_COLS):
            raise ValueError(f"棋盘矩阵尺寸错误: {matrix.shape}, 应为({BOARD_ROWS}, {BOARD_COLS})")

        pieces = [
            ChessPiece.from_code(int(matrix[y, x]), Position(int(x), int(y)))
            for y, x in zip(*np.nonzero(matrix))
        ]
        board = cls(pieces=[], rule_engine=rule_engine)
        board.set_position(pieces, current_player=current_player)
        return board

    def copy(self) -> 'ChessBoard':
        """
        创建棋盘副本

        棋子是不可变对象，只需复制映射和历史列表。

        Returns:
            ChessBoard: 棋盘副本
        """
        new_board = ChessBoard.__new__(ChessBoard)
        new_board.rule_engine = self.rule_engine
        new_board._pieces = dict(self._pieces)
        new_board._current_player = self._current_player
        new_board._history = list(self._history)
        new_board._status = self._status
        return new_board

    def validate_board_state(self) -> Tuple[bool, List[str]]:
        """
        验证棋局状态的合法性

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        from .board_validator import BoardValidator
        return BoardValidator().full_validation(self)

    def to_visual_string(self) -> str:
        """
        转换为可视化字符串

        Returns:
            str: 可视化的棋盘字符串
        """
        lines = ["   " + " ".join(f"{c} " for c in CHINESE_COLUMNS)]
        for y in range(BOARD_ROWS):
            cells = []
            for x in range(BOARD_COLS):
                piece = self._pieces.get(Position(x, y))
                cells.append(piece.symbol if piece else "・")
            lines.append(f"{CHINESE_ROWS[y]} " + " ".join(cells))
            if y == 4:
                lines.append("   " + "～ " * BOARD_COLS)
        lines.append(f"当前玩家: {self._current_player.display_name}")
        return "\n".join(lines)

    def __str__(self) -> str:
        """字符串表示"""
        return self.to_visual_string()

    def __eq__(self, other) -> bool:
        """相等性比较：棋子摆放、当前玩家和走法数"""
        if not isinstance(other, ChessBoard):
            return False
        return (self._pieces == other._pieces and
                self._current_player is other._current_player and
                len(self._history) == len(other._history))

    __hash__ = None
