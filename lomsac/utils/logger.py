"""
lomsac 日志配置

包内各模块通过 logging.getLogger(__name__) 取得 lomsac.* 下的子记录器，
处理器只挂在包的根记录器上，子记录器的消息向上传递
"""

import logging
import sys
from pathlib import Path

# 包的根记录器名称
ROOT_LOGGER_NAME = __name__.split('.')[0]
LOG_FORMAT = '[%(asctime)s %(levelname)s] %(name)s: %(message)s'


def setupLogger(name=ROOT_LOGGER_NAME, log_level=logging.INFO, log_file=None):
    """ 配置记录器的控制台输出和可选的文件输出

    参数
    ----------
    name : str
        记录器名称，默认为包的根记录器，此时包内所有模块的日志都会输出
    log_level : int
        日志级别
    log_file : str 可选
        日志文件路径，所在目录不存在时自动创建

    返回
    ----------
    logging.Logger
        配置好的记录器，重复调用只更新级别，每种处理器只添加一次
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    handler_names = {handler.get_name() for handler in logger.handlers}
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    if 'console' not in handler_names:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name('console')
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file and 'file' not in handler_names:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.set_name('file')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
