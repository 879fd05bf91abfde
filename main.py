# main.py
import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.config import Settings, settings
from app.api.routes import game, ws
from app.core.errors import GameError
from app.core.logging_middleware import log_requests
from app.core.logger import logger
from app.services.broadcast_service import BroadcastGateway
from app.services.game_service import GameService
from app.stores.factory import build_store

def create_app(config: Settings = settings, service: Optional[GameService] = None) -> FastAPI:
    """앱 생성 (게임 서비스/게이트웨이를 여기서 만들어 주입)"""

    if service is None:
        store = build_store(config.database_url, echo=config.debug)
        service = GameService(store, duration_ms=config.game_duration_ms)
    gateway = BroadcastGateway(service)

    # ===== 시작/종료 (상태 점검 루프) =====
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{config.app_name} 서버 시작 (저장소: {service.store.name})")
        ticker = asyncio.create_task(gateway.run_ticker(config.tick_interval_seconds))
        yield
        ticker.cancel()
        with suppress(asyncio.CancelledError):
            await ticker
        logger.info(f"{config.app_name} 서버 종료")

    app = FastAPI(
        title=config.app_name,
        debug=config.debug,
        lifespan=lifespan
    )

    app.state.game_service = service
    app.state.gateway = gateway
    app.state.admin_token = config.admin_token

    # ===== 로깅 미들웨어 =====
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        return await log_requests(request, call_next)

    # 도메인 오류 -> JSON 응답 (요청자에게만)
    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 라우터 등록
    app.include_router(game.router)
    app.include_router(ws.router)

    @app.get("/health")
    def health_check():
        """헬스체크"""
        return {
            "status": "healthy",
            "service": config.app_name,
            "store": service.store.name,
            "degraded": service.store.degraded
        }

    return app

app = create_app()
