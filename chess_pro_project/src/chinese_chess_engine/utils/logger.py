"""
日志系统

引擎的类通过 LoggerMixin 记录到 chess_engine 下，模块级日志记录到包名下，
命令行入口用 setup_logging 按系统配置一次性设置两者。
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional, Sequence

ENGINE_LOGGERS = ('chess_engine', 'chess_pro_project')

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _create_handlers(log_file: Optional[str], log_dir: str, max_size: int,
                     backup_count: int, console_output: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if console_output:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            filename=log_path / log_file,
            maxBytes=max_size * 1024 * 1024,
            backupCount=backup_count,
            encoding='utf-8'
        ))
    return handlers


def setup_logger(
    name: str = 'chess_engine',
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_dir: str = 'logs/chinese_chess_engine',
    max_size: int = 10,
    backup_count: int = 5,
    console_output: bool = True
) -> logging.Logger:
    """
    设置日志记录器

    已有处理器的记录器原样返回，重复调用不会叠加输出。

    Args:
        name: 日志记录器名称
        level: 日志级别，不区分大小写，无法识别时使用INFO
        log_file: 日志文件名，为空时不写文件
        log_dir: 日志目录
        max_size: 单个日志文件最大大小(MB)
        backup_count: 轮转保留的文件数量
        console_output: 是否输出到标准输出

    Returns:
        logging.Logger: 配置好的日志记录器
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _create_handlers(log_file, log_dir, max_size, backup_count, console_output):
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def setup_logging(system_config, debug: bool = False,
                  names: Sequence[str] = ENGINE_LOGGERS) -> None:
    """
    按系统配置设置引擎使用的全部日志记录器

    Args:
        system_config: 系统配置
        debug: 调试模式下使用DEBUG级别并输出到控制台
        names: 要设置的日志记录器名称
    """
    level = 'DEBUG' if debug else system_config.log_level
    for name in names:
        setup_logger(
            name=name,
            level=level,
            log_file=system_config.log_file or None,
            log_dir=system_config.log_dir,
            max_size=system_config.log_max_size,
            backup_count=system_config.log_backup_count,
            console_output=debug
        )


def get_logger(name: str = 'chess_engine') -> logging.Logger:
    """获取日志记录器"""
    return logging.getLogger(name)


class LoggerMixin:
    """为棋盘等类提供以类名命名的日志记录器"""

    @property
    def logger(self) -> logging.Logger:
        return get_logger(f'chess_engine.{self.__class__.__name__}')

    def log_info(self, message: str, *args, **kwargs):
        self.logger.info(message, *args, **kwargs)

    def log_warning(self, message: str, *args, **kwargs):
        self.logger.warning(message, *args, **kwargs)

    def log_debug(self, message: str, *args, **kwargs):
        self.logger.debug(message, *args, **kwargs)


class PerformanceLogger:
    """
    搜索性能日志

    不保存计时状态，多个线程中的搜索可以共用同一个实例。
    """

    def __init__(self, name: str = 'performance'):
        self.logger = get_logger(f'chess_engine.{name}')

    def log_search_stats(self, depth: int, nodes: int, cutoffs: int, time_used: float):
        """
        记录一次搜索的统计信息

        Args:
            depth: 搜索深度
            nodes: 访问的节点数
            cutoffs: 剪枝次数
            time_used: 耗时(秒)
        """
        nodes_per_second = nodes / time_used if time_used > 0 else 0.0
        self.logger.info(
            f"搜索统计 - 深度: {depth}, 节点数: {nodes}, 剪枝次数: {cutoffs}, "
            f"耗时: {time_used:.3f}秒, 每秒节点数: {nodes_per_second:.0f}"
        )


performance_logger = PerformanceLogger()
