"""
象棋棋子

定义棋子的数据结构、显示符号和整数编码。
"""

from dataclasses import dataclass, replace
from typing import Dict, Tuple

from .constants import PieceType, PieceColor
from .position import Position


# 棋子整数编码 (与矩阵格式一致，红方为正，黑方为负)
PIECE_CODES: Dict[PieceType, int] = {
    PieceType.GENERAL: 1,    # 帅/将
    PieceType.ADVISOR: 2,    # 仕/士
    PieceType.ELEPHANT: 3,   # 相/象
    PieceType.HORSE: 4,      # 马
    PieceType.CHARIOT: 5,    # 车
    PieceType.CANNON: 6,     # 炮
    PieceType.SOLDIER: 7,    # 兵/卒
}

CODE_TO_TYPE: Dict[int, PieceType] = {code: piece_type for piece_type, code in PIECE_CODES.items()}

# 棋子名称映射 (红方, 黑方)
PIECE_SYMBOLS: Dict[PieceType, Tuple[str, str]] = {
    PieceType.CHARIOT: ("車", "車"),
    PieceType.HORSE: ("馬", "馬"),
    PieceType.ELEPHANT: ("相", "象"),
    PieceType.ADVISOR: ("仕", "士"),
    PieceType.GENERAL: ("帥", "將"),
    PieceType.CANNON: ("炮", "炮"),
    PieceType.SOLDIER: ("兵", "卒"),
}

# 中文记法使用的简体名称
PIECE_NAMES: Dict[PieceType, Tuple[str, str]] = {
    PieceType.CHARIOT: ("车", "车"),
    PieceType.HORSE: ("马", "马"),
    PieceType.ELEPHANT: ("相", "象"),
    PieceType.ADVISOR: ("仕", "士"),
    PieceType.GENERAL: ("帅", "将"),
    PieceType.CANNON: ("炮", "炮"),
    PieceType.SOLDIER: ("兵", "卒"),
}

# 初始局面中各类棋子所在的列 (红黑相同)
STARTING_COLUMNS: Dict[PieceType, Tuple[int, ...]] = {
    PieceType.CHARIOT: (0, 8),
    PieceType.HORSE: (1, 7),
    PieceType.ELEPHANT: (2, 6),
    PieceType.ADVISOR: (3, 5),
    PieceType.GENERAL: (4,),
    PieceType.CANNON: (1, 7),
    PieceType.SOLDIER: (0, 2, 4, 6, 8),
}

# 初始局面中各类棋子所在的行 (红方)；黑方为 9 - y
RED_STARTING_ROWS: Dict[PieceType, int] = {
    PieceType.CHARIOT: 9,
    PieceType.HORSE: 9,
    PieceType.ELEPHANT: 9,
    PieceType.ADVISOR: 9,
    PieceType.GENERAL: 9,
    PieceType.CANNON: 7,
    PieceType.SOLDIER: 6,
}


@dataclass(frozen=True)
class ChessPiece:
    """
    象棋棋子类

    不可变值类型；棋子移动后得到新的实例。
    """
    type: PieceType
    color: PieceColor
    position: Position

    @property
    def symbol(self) -> str:
        """棋子显示符号（中文）"""
        red_symbol, black_symbol = PIECE_SYMBOLS[self.type]
        return red_symbol if self.color is PieceColor.RED else black_symbol

    @property
    def name(self) -> str:
        """棋子简体中文名称"""
        red_name, black_name = PIECE_NAMES[self.type]
        return red_name if self.color is PieceColor.RED else black_name

    @property
    def english_symbol(self) -> str:
        """棋子英文标识，如 R_CHARIOT"""
        return f"{self.color.name[0]}_{self.type.name}"

    @property
    def code(self) -> int:
        """棋子整数编码，红方为正，黑方为负"""
        code = PIECE_CODES[self.type]
        return code if self.color is PieceColor.RED else -code

    @classmethod
    def from_code(cls, code: int, position: Position) -> 'ChessPiece':
        """
        从整数编码创建棋子

        Args:
            code: 棋子编码 (±1..±7)
            position: 棋子位置

        Returns:
            ChessPiece: 棋子对象
        """
        piece_type = CODE_TO_TYPE.get(abs(int(code)))
        if piece_type is None:
            raise ValueError(f"无效的棋子编码: {code}")
        color = PieceColor.RED if code > 0 else PieceColor.BLACK
        return cls(piece_type, color, position)

    def is_in_starting_position(self) -> bool:
        """判断该棋子是否位于其类型和颜色对应的初始位置"""
        row = RED_STARTING_ROWS[self.type]
        if self.color is PieceColor.BLACK:
            row = 9 - row
        return self.position.y == row and self.position.x in STARTING_COLUMNS[self.type]

    def with_position(self, new_position: Position) -> 'ChessPiece':
        """创建副本，更新位置"""
        return replace(self, position=new_position)

    def __str__(self) -> str:
        return f"{self.symbol}@{self.position}"


def standard_layout():
    """
    生成标准初始局面的全部棋子

    Returns:
        List[ChessPiece]: 32个棋子，红方在前
    """
    pieces = []
    for color in (PieceColor.RED, PieceColor.BLACK):
        for piece_type, columns in STARTING_COLUMNS.items():
            row = RED_STARTING_ROWS[piece_type]
            if color is PieceColor.BLACK:
                row = 9 - row
            for col in columns:
                pieces.append(ChessPiece(piece_type, color, Position(col, row)))
    return pieces
