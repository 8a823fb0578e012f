from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Optional, Literal, Dict, Any, Set
import asyncio, contextlib, logging, time, websockets

log = logging.getLogger(__name__)

class LandmarkOut(BaseModel):
    x: float; y: float; z: float = 0.0

class EyeLineOut(BaseModel):
    left_eye: LandmarkOut; right_eye: LandmarkOut; angle: float; length: float

class DebugSnapshot(BaseModel):
    """Human-readable per-frame dump for debug views; not a stable protocol."""
    ts: float = Field(default_factory=lambda: time.time())
    landmarks: Dict[str, LandmarkOut]
    eye_line: Optional[EyeLineOut] = None
    face_width: float
    direction: Literal["left", "right", "unknown"] = "unknown"
    extra: Dict[str, Any] = {}

    @classmethod
    def build(cls, named, eye_line=None, direction="unknown", **extra) -> "DebugSnapshot":
        el = None
        if eye_line is not None:
            el = EyeLineOut(left_eye=LandmarkOut(x=eye_line.left_eye.x, y=eye_line.left_eye.y),
                            right_eye=LandmarkOut(x=eye_line.right_eye.x, y=eye_line.right_eye.y),
                            angle=eye_line.angle, length=eye_line.length)
        return cls(landmarks={k: LandmarkOut(**v) for k, v in named.to_dict().items()},
                   eye_line=el, face_width=named.face_width, direction=direction, extra=extra)

async def ws_broadcast(queue: "asyncio.Queue[str]", host="0.0.0.0", port=8765):
    """Fan out every line put on `queue` to all connected websocket clients."""
    clients: Set[Any] = set()

    async def handler(websocket):
        clients.add(websocket)
        log.info("debug client connected (%d total)", len(clients))
        try:
            await websocket.wait_closed()
        finally:
            clients.discard(websocket)

    async with websockets.serve(handler, host, port):
        log.info("broadcasting snapshots on ws://%s:%d", host, port)
        while True:
            msg = await queue.get()
            if clients:
                # a client that dropped mid-send is removed by its own handler
                await asyncio.gather(*[c.send(msg) for c in list(clients)], return_exceptions=True)

async def run_alongside(main, background):
    """
    Run `main` while `background` serves next to it; returns main's result.
    If `background` fails first (e.g. the port is taken) main is cancelled and the error re-raised.
    """
    fg = asyncio.ensure_future(main); bg = asyncio.ensure_future(background)
    try:
        await asyncio.wait({fg, bg}, return_when=asyncio.FIRST_COMPLETED)
        if bg.done() and not bg.cancelled() and bg.exception() is not None:
            raise bg.exception()
        return await fg
    finally:
        for t in (fg, bg): t.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.gather(fg, bg, return_exceptions=True)
