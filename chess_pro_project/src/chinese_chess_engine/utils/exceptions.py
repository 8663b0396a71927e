"""
异常定义

定义象棋引擎的各种异常类型。

注意：非法走法、空历史悔棋等属于正常的交互输入，规则引擎以布尔值返回，
不会抛出异常。这里的异常只用于编程错误和会话层的严格接口。
"""


class ChessEngineError(Exception):
    """
    象棋引擎基础异常

    所有象棋引擎相关异常的基类。
    """

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__

    def __str__(self):
        return f"[{self.error_code}] {self.message}"


class InvalidCoordinateError(ChessEngineError, ValueError):
    """
    坐标越界异常

    构造超出棋盘范围的位置时抛出。
    """

    def __init__(self, x: int, y: int):
        message = f"无效的位置坐标: ({x}, {y})，x应在0-8之间，y应在0-9之间"
        super().__init__(message, "INVALID_COORDINATE")
        self.x = x
        self.y = y


class InvalidMoveError(ChessEngineError):
    """
    非法走法异常

    仅在调用方显式要求严格模式时抛出。
    """

    def __init__(self, move_str: str, reason: str = ""):
        message = f"非法走法: {move_str}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, "INVALID_MOVE")
        self.move_str = move_str
        self.reason = reason


class SearchDepthError(ChessEngineError, ValueError):
    """
    搜索深度异常

    当搜索深度参数无效时抛出。
    """

    def __init__(self, depth: int):
        super().__init__(f"无效的搜索深度: {depth}，应为非负整数", "SEARCH_DEPTH_ERROR")
        self.depth = depth


class ConfigurationError(ChessEngineError):
    """
    配置错误异常

    当配置参数无效时抛出。
    """

    def __init__(self, config_name: str, reason: str = ""):
        message = f"配置错误 - {config_name}"
        if reason:
            message += f": {reason}"
        super().__init__(message, "CONFIG_ERROR")
        self.config_name = config_name
        self.reason = reason


class GameStateError(ChessEngineError):
    """
    游戏状态异常

    当会话状态不允许执行某项操作时抛出。
    """

    def __init__(self, state_description: str, reason: str = ""):
        message = f"游戏状态错误: {state_description}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, "GAME_STATE_ERROR")
        self.state_description = state_description
        self.reason = reason
