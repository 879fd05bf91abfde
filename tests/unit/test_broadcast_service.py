"""브로드캐스트 게이트웨이 테스트 (가짜 WebSocket 사용)"""
import asyncio
import time
from contextlib import suppress
from typing import Any, Dict, List

import pytest

from app.models.game import GameStatus
from app.services.broadcast_service import BroadcastGateway, ObserverRole
from app.services.game_record import GameRecord
from app.services.game_service import GameService
from app.stores.memory import MemoryGameStore

from helpers.fake_clock import DURATION_MS, FakeClock


class FakeSocket:
    """보낸 메시지를 모아두는 WebSocket 대역"""

    def __init__(self, broken: bool = False):
        self.accepted = False
        self.broken = broken
        self.sent: List[Dict[str, Any]] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: Dict[str, Any]) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(message)

    def events(self) -> List[str]:
        return [m["event"] for m in self.sent]

    def last(self, event: str) -> Dict[str, Any]:
        return [m for m in self.sent if m["event"] == event][-1]["data"]


@pytest.fixture
def gateway(service: GameService) -> BroadcastGateway:
    return BroadcastGateway(service)


class TestConnections:
    async def test_connect_sends_snapshot(self, gateway: BroadcastGateway) -> None:
        socket = FakeSocket()

        await gateway.connect(socket)

        assert socket.accepted
        assert gateway.count == 1
        assert socket.events() == ["state_changed"]
        assert socket.last("state_changed")["status"] == "IDLE"
        assert socket.last("state_changed")["duration_ms"] == DURATION_MS

    async def test_disconnect_removes_observer(self, gateway: BroadcastGateway) -> None:
        socket = FakeSocket()
        await gateway.connect(socket)
        await gateway.disconnect(socket)

        assert gateway.count == 0
        assert gateway.observer(socket) is None

    async def test_login_reports_has_voted(self, gateway: BroadcastGateway, service: GameService) -> None:
        service.start()
        service.cast_vote("alice", "John", "Jane")
        socket = FakeSocket()
        await gateway.connect(socket)

        await gateway.identify(socket, "alice")

        data = socket.last("login_ok")
        assert data["voter_id"] == "alice"
        assert data["has_voted"] is True
        assert data["state"]["status"] == "VOTING"
        assert gateway.observer(socket).voter_id == "alice"

    async def test_promote_admin_sends_full_state(self, gateway: BroadcastGateway, service: GameService) -> None:
        service.start()
        service.cast_vote("alice", "John", "Jane")
        socket = FakeSocket()
        await gateway.connect(socket)

        await gateway.promote_admin(socket)

        assert gateway.observer(socket).role == ObserverRole.ADMIN
        votes = socket.last("admin_state")["votes"]
        assert [v["voter_id"] for v in votes] == ["alice"]


class TestBroadcast:
    async def test_state_to_all_ballots_to_admins_only(self, gateway: BroadcastGateway, service: GameService) -> None:
        player, admin = FakeSocket(), FakeSocket()
        await gateway.connect(player)
        await gateway.connect(admin)
        await gateway.promote_admin(admin)
        service.start()
        service.cast_vote("alice", "John", "Jane")

        await gateway.broadcast_state()

        assert player.events() == ["state_changed", "state_changed"]
        assert player.last("state_changed")["total_votes"] == 1
        assert "votes" not in player.last("state_changed")
        assert admin.events()[-2:] == ["state_changed", "admin_state"]
        assert admin.last("admin_state")["votes"][0]["mr_name"] == "John"

    async def test_dead_connections_dropped(self, gateway: BroadcastGateway) -> None:
        alive, dead = FakeSocket(), FakeSocket()
        await gateway.connect(alive)
        await gateway.connect(dead)
        dead.broken = True

        await gateway.broadcast("game_reset")

        assert gateway.count == 1
        assert alive.events()[-1] == "game_reset"

    async def test_send_to_voter_targets_sessions(self, gateway: BroadcastGateway) -> None:
        alice, bob = FakeSocket(), FakeSocket()
        await gateway.connect(alice)
        await gateway.connect(bob)
        await gateway.identify(alice, "alice")
        await gateway.identify(bob, "bob")

        sent = await gateway.send_to_voter("alice", "vote_accepted", {"voter_id": "alice"})

        assert sent == 1
        assert alice.events()[-1] == "vote_accepted"
        assert "vote_accepted" not in bob.events()

    async def test_reset_event_then_state(self, gateway: BroadcastGateway) -> None:
        socket = FakeSocket()
        await gateway.connect(socket)

        await gateway.broadcast_reset()

        assert socket.events()[-2:] == ["game_reset", "state_changed"]
        assert socket.sent[-2]["data"] == {}


class TestTicker:
    async def test_tick_announces_finish_once(self, gateway: BroadcastGateway, service: GameService, clock: FakeClock) -> None:
        socket = FakeSocket()
        await gateway.connect(socket)
        service.start()
        await gateway.broadcast_state()

        clock.advance(DURATION_MS - 1)
        assert await gateway.tick() is False

        clock.advance(1)
        assert await gateway.tick() is True
        assert socket.last("state_changed")["status"] == "FINISHED"
        assert gateway.last_status == GameStatus.FINISHED

        assert await gateway.tick() is False
        assert socket.events().count("state_changed") == 3

    async def test_tick_without_changes_is_silent(self, gateway: BroadcastGateway) -> None:
        socket = FakeSocket()
        await gateway.connect(socket)

        assert await gateway.tick() is False
        assert socket.events() == ["state_changed"]


class SlowStore(MemoryGameStore):
    """save가 느린 저장소 (DB 커밋 지연)"""

    def __init__(self, delay: float):
        super().__init__()
        self.delay = delay

    def save(self, record: GameRecord) -> None:
        time.sleep(self.delay)
        super().save(record)


class TestEventLoop:
    async def test_slow_store_does_not_block_loop(self, clock: FakeClock) -> None:
        service = GameService(SlowStore(delay=0.3), duration_ms=DURATION_MS, clock=clock)
        service.start()
        gateway = BroadcastGateway(service)
        clock.advance(DURATION_MS)

        loop = asyncio.get_running_loop()
        beats: List[float] = []

        async def heartbeat() -> None:
            while True:
                beats.append(loop.time())
                await asyncio.sleep(0.01)

        task = asyncio.create_task(heartbeat())
        await asyncio.sleep(0.02)

        assert await gateway.tick() is True

        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

        gaps = [b - a for a, b in zip(beats, beats[1:])]
        assert len(beats) > 5
        assert max(gaps) < 0.2
