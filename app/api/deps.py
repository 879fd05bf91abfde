# app/api/deps.py
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.errors import AdminRequired
from app.core.security import verify_admin_token
from app.services.broadcast_service import BroadcastGateway
from app.services.game_service import GameService

# 관리자 Bearer 토큰 스킴 (토큰 미설정 시 생략 가능)
security = HTTPBearer(auto_error=False)

def get_game_service(request: Request) -> GameService:
    """앱에 등록된 게임 서비스"""
    return request.app.state.game_service

def get_gateway(request: Request) -> BroadcastGateway:
    """앱에 등록된 브로드캐스트 게이트웨이"""
    return request.app.state.gateway

def require_admin(
    request: Request,
    token: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> None:
    """관리자 토큰 확인"""
    supplied = token.credentials if token else None
    if not verify_admin_token(request.app.state.admin_token, supplied):
        raise AdminRequired()
