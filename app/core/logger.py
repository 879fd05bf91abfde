# app/core/logger.py
from loguru import logger
import sys
import os

# 로그 디렉토리 (환경변수로 변경 가능)
LOG_DIR = os.getenv("LOG_DIR", "logs")
os.makedirs(LOG_DIR, exist_ok=True)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# 기본 로거 제거
logger.remove()

# 콘솔 출력
logger.add(
    sys.stdout,
    colorize=True,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    level=os.getenv("LOG_LEVEL", "INFO")
)

# 파일 출력 (투표 진행 기록 포함 전체 로그)
logger.add(
    f"{LOG_DIR}/impressive.log",
    rotation="10 MB",
    retention="14 days",
    compression="zip",
    format=FILE_FORMAT,
    level="DEBUG",
    enqueue=True  # 틱 루프/요청 스레드 동시 기록
)

# 에러 전용 파일 (저장소 장애 등)
logger.add(
    f"{LOG_DIR}/error.log",
    rotation="10 MB",
    retention="30 days",
    compression="zip",
    format=FILE_FORMAT,
    level="ERROR",
    enqueue=True
)
