# ipfs_cid/logging_config.py
import logging
import sys
from pathlib import Path

from loguru import logger

from .config import get_settings

# Ensure logs folder exists
Path("logs").mkdir(exist_ok=True)

settings = get_settings()
IS_DEVELOPMENT = settings.ENVIRONMENT == "development"

# Remove default handlers
logger.remove()

LEVEL_EMOJIS = {
    "TRACE": "🔍",
    "DEBUG": "🐛",
    "INFO": "ℹ️ ",
    "SUCCESS": "✅",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "CRITICAL": "🔥",
    "HTTP": "🌐",
}


def _escape(value: str) -> str:
    # loguru treats <...> as color tags
    return value.replace("<", r"\<").replace(">", r"\>")


def formatter(record):
    """Console log format; request extras are optional."""
    level_name = record["level"].name
    emoji = LEVEL_EMOJIS.get(level_name, "💬")
    method = record["extra"].get("method", "")
    path = record["extra"].get("path", "")
    func_name = _escape(record["function"])

    if record["name"].startswith(("httpx", "httpcore")):
        emoji = LEVEL_EMOJIS["HTTP"]
        return (
            f"<green>{record['time']:YYYY-MM-DD HH:mm:ss}</green> "
            f"| <cyan>{emoji} HTTP</cyan> "
            f"| <cyan>{record['name']}</cyan>:<cyan>{func_name}</cyan>:<cyan>{record['line']}</cyan> "
            "- <cyan>{message}</cyan>\n"
        )

    return (
        f"<green>{record['time']:YYYY-MM-DD HH:mm:ss}</green> "
        f"| <level>{emoji} {level_name:<8}</level> "
        f"| <cyan>{record['name']}</cyan>:<cyan>{func_name}</cyan>:<cyan>{record['line']}</cyan> "
        f"| <blue>{method} {path}</blue> "
        "- <level>{message}</level>\n{exception}"
    )


LOG_LEVEL = "DEBUG" if IS_DEVELOPMENT else "INFO"

logger.add(
    sys.stderr,
    format=formatter,
    colorize=True,
    level=LOG_LEVEL,
    enqueue=not IS_DEVELOPMENT,
    backtrace=True,
    diagnose=False,
)


def file_formatter(record):
    method = record["extra"].get("method", "")
    path = record["extra"].get("path", "")
    emoji = LEVEL_EMOJIS.get(record["level"].name, "💬")
    func_name = _escape(record["function"])

    return (
        f"{record['time']:YYYY-MM-DD HH:mm:ss} | {emoji} {record['level'].name:<8} | "
        f"{record['name']}:{func_name}:{record['line']} | "
        f"{method} {path} - " + "{message}\n{exception}"
    )


logger.add(
    "logs/{time:YYYY-MM-DD}.log",
    rotation="1 week",
    compression="zip",
    level="DEBUG",
    format=file_formatter,
    enqueue=not IS_DEVELOPMENT,
)


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


logging.root.handlers = [InterceptHandler()]
logging.root.setLevel(0)

for name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
    logging.getLogger(name).handlers = []
    logging.getLogger(name).propagate = True

logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.INFO)
logging.getLogger("httpcore").setLevel(logging.INFO)
