# app/core/logging_middleware.py
from fastapi import Request
from app.core.logger import logger
import time

# 로그에서 제외할 경로 (헬스체크 폴링)
QUIET_PATHS = {"/health"}

async def log_requests(request: Request, call_next):
    """HTTP 요청/응답 로깅"""

    if request.url.path in QUIET_PATHS:
        return await call_next(request)

    start_time = time.perf_counter()
    client = request.client.host if request.client else "unknown"

    logger.info(f"➡️  {request.method} {request.url.path} from {client}")

    try:
        response = await call_next(request)
    except Exception as e:
        elapsed = (time.perf_counter() - start_time) * 1000
        logger.error(
            f"❌ {request.method} {request.url.path} "
            f"- Error: {e} "
            f"- Time: {elapsed:.2f}ms"
        )
        logger.exception("Exception details:")
        raise

    elapsed = (time.perf_counter() - start_time) * 1000  # ms

    # 4xx는 투표 거절 등 정상 흐름이므로 WARNING
    log = logger.warning if response.status_code >= 400 else logger.info
    log(
        f"⬅️  {request.method} {request.url.path} "
        f"- Status: {response.status_code} "
        f"- Time: {elapsed:.2f}ms"
    )

    return response
