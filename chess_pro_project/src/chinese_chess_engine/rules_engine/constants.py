"""
象棋基础常量

定义棋盘尺寸、棋子类型、棋子颜色和对局状态。
"""

from enum import Enum

# 棋盘尺寸：9列 x 10行
BOARD_COLS = 9
BOARD_ROWS = 10

# 九宫范围 (x坐标)
PALACE_COLS = (3, 4, 5)

# 中文数字，用于坐标文本格式
CHINESE_COLUMNS = "一二三四五六七八九"
CHINESE_ROWS = "一二三四五六七八九十"


class PieceType(Enum):
    """棋子类型枚举"""
    CHARIOT = "chariot"     # 车
    HORSE = "horse"         # 马
    ELEPHANT = "elephant"   # 相/象
    ADVISOR = "advisor"     # 仕/士
    GENERAL = "general"     # 帅/将
    CANNON = "cannon"       # 炮
    SOLDIER = "soldier"     # 兵/卒


class PieceColor(Enum):
    """棋子颜色枚举"""
    RED = "red"
    BLACK = "black"

    @property
    def opponent(self) -> 'PieceColor':
        """对手颜色"""
        return PieceColor.BLACK if self is PieceColor.RED else PieceColor.RED

    @property
    def display_name(self) -> str:
        """中文名称"""
        return "红方" if self is PieceColor.RED else "黑方"


class GameStatus(Enum):
    """对局状态枚举"""
    PLAYING = "playing"
    RED_WINS = "red_wins"
    BLACK_WINS = "black_wins"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        """对局是否已结束"""
        return self is not GameStatus.PLAYING

    @classmethod
    def win_for(cls, color: PieceColor) -> 'GameStatus':
        """指定颜色获胜的状态"""
        return cls.RED_WINS if color is PieceColor.RED else cls.BLACK_WINS
