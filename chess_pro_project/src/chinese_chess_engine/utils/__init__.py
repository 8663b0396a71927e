"""
工具模块

包含日志、异常处理和其他通用工具。
"""

from .logger import setup_logger, setup_logging, get_logger, LoggerMixin, PerformanceLogger, performance_logger
from .exceptions import (
    ChessEngineError, InvalidCoordinateError, InvalidMoveError,
    SearchDepthError, ConfigurationError, GameStateError
)

__all__ = [
    'setup_logger', 'setup_logging', 'get_logger', 'LoggerMixin', 'PerformanceLogger', 'performance_logger',
    'ChessEngineError', 'InvalidCoordinateError', 'InvalidMoveError',
    'SearchDepthError', 'ConfigurationError', 'GameStateError'
]
