"""
Logging setup for HazardWatch.

All output goes through loguru. Records from libraries that use the
standard logging module (uvicorn, aiohttp, aiosqlite) are forwarded to
the same sinks.
"""

from __future__ import annotations
import logging
import sys
from typing import Iterable
from loguru import logger

# loguru 로 흡수할 stdlib 로거
FORWARDED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "aiohttp", "aiosqlite", "asyncio")

class InterceptHandler(logging.Handler):
    """stdlib logging 레코드를 loguru 로 전달하는 핸들러"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).bind(name=record.name).log(level, record.getMessage())

def _forward_stdlib_logging(names: Iterable[str] = FORWARDED_LOGGERS) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in names:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False

# 콘솔 포맷: extra[name] 은 get_logger 로 바인딩한 컴포넌트 이름
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level:<7}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<cyan>{file}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    loguru 를 초기화합니다.

    Args:
        log_level: 최소 로그 레벨
        json_logs: True 이면 stderr 에 한 줄 JSON (컨테이너 수집용),
            False 이면 사람이 읽는 컬러 콘솔 출력
    """
    logger.remove()
    logger.configure(extra={"name": "hazardwatch"})
    if json_logs:
        logger.add(sys.stderr, serialize=True, level=log_level.upper())
    else:
        logger.add(
            sink=lambda m: print(m, end=""),
            format=CONSOLE_FORMAT,
            colorize=True,
            backtrace=True,
            diagnose=False,
            level=log_level.upper(),
        )
    _forward_stdlib_logging()

def setup_logging_dev(log_level: str = "INFO") -> None:
    """개발용 컬러 콘솔 로깅"""
    setup_logging(log_level, json_logs=False)

def get_logger(name: str = "hazardwatch", **ctx):
    """컴포넌트 이름과 선택적 컨텍스트를 바인딩한 logger 반환."""
    return logger.bind(name=name, **ctx)
