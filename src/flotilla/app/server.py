from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from typing import Dict, Set

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pygame.math import Vector2

from ..sim.core.agent import Behavior
from ..sim.core.config import SimulationConfig
from ..sim.core.scene import Scene
from ..sim.core.world import WorldBounds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueuedSnapshot:
    tick: int
    payload: str


class SimulationController:
    def __init__(self, config: SimulationConfig, broadcast_interval: int = 1):
        self.config = config
        self.scene = Scene(config)
        self.broadcast_interval = max(1, broadcast_interval)
        self.running = False
        self.speed_multiplier = 1.0
        self.behavior = Behavior.IDLE
        self.clients: Set[WebSocket] = set()
        self._pending_target: Vector2 | None = None
        self._client_last_sent: Dict[WebSocket, int] = {}
        self._snapshot_queue: deque[QueuedSnapshot] = deque()
        self._lock = asyncio.Lock()
        self._queue_lock = asyncio.Lock()
        self._broadcast_task: asyncio.Task | None = None

    @property
    def tick(self) -> int:
        return self.scene.tick

    async def start(self) -> None:
        if self._broadcast_task is None:
            self._broadcast_task = asyncio.create_task(self._loop())
        self.running = True

    async def stop(self) -> None:
        self.running = False

    async def reset(self) -> None:
        async with self._lock:
            self.scene.reset()
            self._pending_target = None
        async with self._queue_lock:
            self._snapshot_queue.clear()
        for client in self._client_last_sent:
            self._client_last_sent[client] = -1
        await self._broadcast_snapshot()

    async def select_behavior(self, value: str) -> Behavior:
        behavior = Behavior.parse(value)
        if behavior == Behavior.IDLE and str(value).strip().lower() != Behavior.IDLE.value:
            logger.warning("unknown behavior %r selected, idling", value)
        async with self._lock:
            self.behavior = behavior
        return behavior

    async def set_target(self, x: float, y: float) -> None:
        async with self._lock:
            self._pending_target = Vector2(x, y)

    async def set_bounds(self, width: float, height: float) -> WorldBounds:
        if width <= 0.0 or height <= 0.0:
            raise ValueError("world extents must be positive")
        bounds = WorldBounds.from_extents(width, height)
        async with self._lock:
            self.scene.bounds = bounds
        return bounds

    async def step_once(self) -> None:
        async with self._lock:
            target, self._pending_target = self._pending_target, None
            self.scene.step(self.behavior, target=target)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.time_step / self.speed_multiplier)
            if not self.running:
                continue
            await self.step_once()
            if self.tick % self.broadcast_interval == 0:
                await self._broadcast_snapshot()

    async def acknowledge(self, tick: int) -> None:
        async with self._queue_lock:
            while self._snapshot_queue and self._snapshot_queue[0].tick <= tick:
                self._snapshot_queue.popleft()

    def _serialize_snapshot(self) -> QueuedSnapshot:
        snapshot = self.scene.snapshot()
        payload = {
            "type": "snapshot",
            "tick": snapshot.tick,
            "payload": {
                "tick": snapshot.tick,
                "behavior": snapshot.behavior,
                "agents": snapshot.agents,
                "world": asdict(snapshot.world),
                "metadata": asdict(snapshot.metadata),
            },
        }
        return QueuedSnapshot(tick=snapshot.tick, payload=json.dumps(payload))

    async def _send_pending_snapshots(self, client: WebSocket) -> None:
        last_sent = self._client_last_sent.get(client, -1)
        async with self._queue_lock:
            pending = [item for item in self._snapshot_queue if item.tick > last_sent]
        for item in pending:
            await client.send_text(item.payload)
            last_sent = item.tick
        self._client_last_sent[client] = last_sent

    async def _broadcast_snapshot(self) -> None:
        queued = self._serialize_snapshot()
        async with self._queue_lock:
            self._snapshot_queue.append(queued)
        stale: Set[WebSocket] = set()
        for client in self.clients:
            try:
                await self._send_pending_snapshots(client)
            except WebSocketDisconnect:
                stale.add(client)
        for client in stale:
            self.clients.discard(client)
            self._client_last_sent.pop(client, None)


app = FastAPI(title="Flotilla Steering Simulation")
controller = SimulationController(SimulationConfig())


@app.on_event("startup")
async def _startup() -> None:
    await controller.start()


@app.get("/api/status")
async def status() -> JSONResponse:
    snapshot = controller.scene.snapshot()
    return JSONResponse(
        {
            "running": controller.running,
            "tick": controller.tick,
            "behavior": controller.behavior.value,
            "agents": snapshot.agents,
        }
    )


@app.post("/api/control/start")
async def start_simulation() -> JSONResponse:
    controller.running = True
    return JSONResponse({"running": True})


@app.post("/api/control/stop")
async def stop_simulation() -> JSONResponse:
    controller.running = False
    return JSONResponse({"running": False})


@app.post("/api/control/reset")
async def reset_simulation() -> JSONResponse:
    await controller.reset()
    return JSONResponse({"running": controller.running, "tick": controller.tick})


@app.post("/api/control/speed")
async def set_speed(payload: dict) -> JSONResponse:
    speed = float(payload.get("multiplier", 1.0))
    controller.speed_multiplier = max(0.1, min(5.0, speed))
    return JSONResponse({"multiplier": controller.speed_multiplier})


@app.post("/api/behavior")
async def select_behavior(payload: dict) -> JSONResponse:
    behavior = await controller.select_behavior(str(payload.get("behavior", "")))
    return JSONResponse({"behavior": behavior.value})


@app.post("/api/target")
async def set_target(payload: dict) -> JSONResponse:
    try:
        x = float(payload["x"])
        y = float(payload["y"])
    except (KeyError, TypeError, ValueError):
        return JSONResponse({"error": "target needs numeric x and y"}, status_code=400)
    await controller.set_target(x, y)
    return JSONResponse({"x": x, "y": y})


@app.post("/api/bounds")
async def set_bounds(payload: dict) -> JSONResponse:
    try:
        bounds = await controller.set_bounds(float(payload["width"]), float(payload["height"]))
    except (KeyError, TypeError, ValueError) as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    return JSONResponse({"min_x": bounds.min_x, "min_y": bounds.min_y, "width": bounds.width, "height": bounds.height})


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    controller.clients.add(websocket)
    controller._client_last_sent[websocket] = -1
    await controller._send_pending_snapshots(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            try:
                payload = json.loads(message)
            except json.JSONDecodeError:
                continue
            kind = payload.get("type")
            if kind == "ack":
                tick = payload.get("tick")
                if isinstance(tick, int):
                    await controller.acknowledge(tick)
            elif kind == "behavior":
                await controller.select_behavior(str(payload.get("behavior", "")))
            elif kind == "click":
                x, y = payload.get("x"), payload.get("y")
                if isinstance(x, (int, float)) and isinstance(y, (int, float)):
                    await controller.set_target(float(x), float(y))
    except WebSocketDisconnect:
        controller.clients.discard(websocket)
        controller._client_last_sent.pop(websocket, None)


__all__ = ["app", "controller"]
