"""
棋盘位置

定义棋盘坐标及其中文文本格式的转换。

坐标约定：x 为列 (0-8，从左到右)，y 为行 (0-9，从上到下)。
黑方位于上方 (y 0-4)，红方位于下方 (y 5-9)。
"""

from dataclasses import dataclass
from typing import Any, Optional

from .constants import (
    BOARD_COLS, BOARD_ROWS, PALACE_COLS,
    CHINESE_COLUMNS, CHINESE_ROWS, PieceColor
)
from ..utils.exceptions import InvalidCoordinateError


@dataclass(frozen=True, order=True)
class Position:
    """
    棋盘位置类

    不可变值类型，构造时校验坐标范围。
    """
    x: int
    y: int

    def __post_init__(self):
        """初始化后验证坐标有效性"""
        if not self.is_valid(self.x, self.y):
            raise InvalidCoordinateError(self.x, self.y)

    @staticmethod
    def is_valid(x: int, y: int) -> bool:
        """检查坐标是否在棋盘范围内"""
        # bool 是 int 的子类，不能当作坐标
        if isinstance(x, bool) or isinstance(y, bool):
            return False
        return (isinstance(x, int) and isinstance(y, int)
                and 0 <= x < BOARD_COLS and 0 <= y < BOARD_ROWS)

    def offset(self, dx: int, dy: int) -> Optional['Position']:
        """
        按偏移量获取新位置

        Args:
            dx: 列偏移
            dy: 行偏移

        Returns:
            Optional[Position]: 新位置，越界时返回None
        """
        x, y = self.x + dx, self.y + dy
        if not self.is_valid(x, y):
            return None
        return Position(x, y)

    def is_in_palace(self, color: PieceColor) -> bool:
        """判断是否在指定方的九宫内"""
        if self.x not in PALACE_COLS:
            return False
        if color is PieceColor.RED:
            return 7 <= self.y <= 9
        return 0 <= self.y <= 2

    def is_across_river(self, color: PieceColor) -> bool:
        """判断对指定方而言是否已过河"""
        if color is PieceColor.RED:
            return self.y < 5
        return self.y > 4

    def is_on_home_side(self, color: PieceColor) -> bool:
        """判断是否位于指定方的己方半场"""
        return not self.is_across_river(color)

    def to_chinese(self) -> str:
        """
        转换为中文坐标文本

        Returns:
            str: 两个字符，列用一至九，行用一至十，如 "五十"
        """
        return f"{CHINESE_COLUMNS[self.x]}{CHINESE_ROWS[self.y]}"

    @classmethod
    def from_string(cls, text: Any) -> Optional['Position']:
        """
        从中文坐标文本解析位置

        Args:
            text: 坐标文本，如 "五十"

        Returns:
            Optional[Position]: 解析出的位置，格式不正确时返回None
        """
        if not isinstance(text, str) or len(text) != 2:
            return None

        x = CHINESE_COLUMNS.find(text[0])
        y = CHINESE_ROWS.find(text[1])
        if x < 0 or y < 0:
            return None

        return cls(x, y)

    def __str__(self) -> str:
        """字符串表示"""
        return self.to_chinese()

    def __repr__(self) -> str:
        return f"Position(x={self.x}, y={self.y})"
