"""
象棋走法数据结构

定义象棋走法的表示和记法转换功能。
"""

from dataclasses import dataclass, field
from typing import Optional

from .constants import PieceType, PieceColor
from .piece import ChessPiece
from .position import Position


# 红方记法使用中文数字，黑方使用全角阿拉伯数字
RED_NUMBERS = "一二三四五六七八九"
BLACK_NUMBERS = "１２３４５６７８９"

# 斜线走子的棋子，进退时记录目标纵线而不是步数
DIAGONAL_PIECES = (PieceType.HORSE, PieceType.ELEPHANT, PieceType.ADVISOR)


@dataclass(frozen=True)
class Move:
    """
    象棋走法类

    表示一个已确定的走法。相等性只比较起点、终点和移动的棋子，
    因此界面构造的走法（不带被吃棋子）可以与生成的合法走法匹配。
    """
    from_pos: Position
    to_pos: Position
    piece: ChessPiece
    captured_piece: Optional[ChessPiece] = field(default=None, compare=False)

    @property
    def color(self) -> PieceColor:
        """走子方颜色"""
        return self.piece.color

    @property
    def is_capture(self) -> bool:
        """是否吃子"""
        return self.captured_piece is not None

    def moved_piece(self) -> ChessPiece:
        """走子后的棋子"""
        return self.piece.with_position(self.to_pos)

    def to_coordinate_notation(self) -> str:
        """
        转换为坐标记法

        Returns:
            str: 起点和终点的中文坐标，如 "二十三八"
        """
        return f"{self.from_pos.to_chinese()}{self.to_pos.to_chinese()}"

    @classmethod
    def from_coordinate_notation(cls, notation: str, board) -> Optional['Move']:
        """
        从坐标记法创建Move对象

        Args:
            notation: 坐标记法字符串，如 "二十三八"
            board: 当前棋盘，用于确定起点上的棋子

        Returns:
            Optional[Move]: Move对象，格式错误或起点无子时返回None
        """
        if not isinstance(notation, str) or len(notation) != 4:
            return None

        from_pos = Position.from_string(notation[:2])
        to_pos = Position.from_string(notation[2:])
        if from_pos is None or to_pos is None:
            return None

        piece = board.piece_at(from_pos)
        if piece is None:
            return None

        return cls(from_pos=from_pos, to_pos=to_pos, piece=piece,
                   captured_piece=board.piece_at(to_pos))

    def to_chinese_notation(self) -> str:
        """
        转换为中文纵线记法

        纵线从走子方的右手边开始计数。

        Returns:
            str: 中文记法字符串，如 "炮二平五"
        """
        is_red = self.piece.color is PieceColor.RED
        numbers = RED_NUMBERS if is_red else BLACK_NUMBERS

        def file_label(pos: Position) -> str:
            return numbers[8 - pos.x] if is_red else numbers[pos.x]

        from_file = file_label(self.from_pos)
        dy = self.to_pos.y - self.from_pos.y

        if dy == 0:
            return f"{self.piece.name}{from_file}平{file_label(self.to_pos)}"

        advancing = dy < 0 if is_red else dy > 0
        direction = "进" if advancing else "退"

        if self.piece.type in DIAGONAL_PIECES:
            return f"{self.piece.name}{from_file}{direction}{file_label(self.to_pos)}"

        return f"{self.piece.name}{from_file}{direction}{numbers[abs(dy) - 1]}"

    def __str__(self) -> str:
        """字符串表示"""
        return self.to_coordinate_notation()

    def __repr__(self) -> str:
        """详细字符串表示"""
        captured = self.captured_piece.english_symbol if self.captured_piece else None
        return (f"Move(from_pos={self.from_pos!r}, to_pos={self.to_pos!r}, "
                f"piece={self.piece.english_symbol}, captured_piece={captured})")
