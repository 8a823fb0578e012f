from __future__ import annotations
import typer, json, asyncio, logging
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from pathlib import Path
from typing import Optional
from .config import load_config, ConfigError, EyewearConfig
from .runtime.bridge import CoordinateBridge
from .runtime.pipeline import Tracker
from .pose.estimator import PoseEstimator
from .pose.transform import to_transform

app = typer.Typer(add_completion=False, help="EyewearKit CLI (ewk)")
log = logging.getLogger("eyewearkit")

def _setup_logging(level: str):
    logging.basicConfig(level=level.upper(), format="%(message)s", datefmt="[%X]", force=True,
                        handlers=[RichHandler(console=Console(stderr=True), show_path=False)])

def _load(config: Optional[str]) -> EyewearConfig:
    try:
        return load_config(config)
    except ConfigError as e:
        raise typer.BadParameter(str(e), param_hint="--config")

def _frame_record(i: int, res, bridge: CoordinateBridge, poses: PoseEstimator) -> dict:
    pose = poses.update(bridge.read())
    rec = {"frame": i, "detected": res.detected, "direction": res.direction,
           "coordinates": bridge.read().model_dump(by_alias=True),
           "pose": pose.to_dict() if pose else None}
    if pose is not None:
        t = to_transform(pose)
        rec["transform"] = {"scale": list(t.scale), "rotation": list(t.rotation), "position": list(t.position)}
    return rec

def _read_landmark_sets(path: Path):
    with open(path, "r") as f:
        for n, line in enumerate(f, 1):
            line = line.strip()
            if not line: continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                raise typer.BadParameter(f"{path}:{n}: {e}", param_hint="FILE")
            yield data.get("landmarks") if isinstance(data, dict) else data

@app.command()
def replay(file: Path = typer.Argument(..., exists=True, dir_okay=False),
           config: Optional[str] = typer.Option(None, help="YAML config"),
           log_level: str = typer.Option("warning")):
    """
    Run the pipeline over recorded landmark sets (JSONL, one [[x,y,z],...] or null per line)
    and print one JSON line per frame.
    """
    _setup_logging(log_level)
    cfg = _load(config)
    bridge = CoordinateBridge()
    poses = PoseEstimator(cfg.pose.params())
    # the recorded landmarks are the "frames"; identity detector
    tracker = Tracker(detector=lambda lms: lms, bridge=bridge, config=cfg)
    for i, lms in enumerate(_read_landmark_sets(file)):
        try:
            res = tracker(lms)
        except ValueError as e:
            raise typer.BadParameter(f"{file}: frame {i}: {e}", param_hint="FILE")
        typer.echo(json.dumps(_frame_record(i, res, bridge, poses)))

@app.command()
def track(config: Optional[str] = typer.Option(None, help="YAML config"),
          camera: Optional[str] = typer.Option(None, help="camera index or video file; overrides config"),
          show: bool = typer.Option(True, help="debug window with landmarks and eye-line"),
          glasses: Optional[Path] = typer.Option(None, help="BGRA glasses image drawn along the eye-line"),
          jsonl: bool = typer.Option(False, help="print a debug snapshot per frame"),
          ws: bool = typer.Option(False, help="broadcast snapshots on ws://0.0.0.0:8765"),
          log_level: str = typer.Option("info")):
    """
    Live camera: detect landmarks, update the coordinate bridge, derive the overlay pose.
    Press q in the debug window to quit.
    """
    import cv2
    from .face.detector import FaceLandmarks
    from .io.camera import frames_from_config
    from .runtime.events import ws_broadcast, run_alongside
    from .viz.debug import DebugRenderer

    _setup_logging(log_level)
    cfg = _load(config)
    glasses_img = None
    if glasses is not None:
        glasses_img = cv2.imread(str(glasses), cv2.IMREAD_UNCHANGED)
        if glasses_img is None:
            log.warning("could not load glasses image %s, drawing without it", glasses)

    detector = FaceLandmarks.from_config(cfg.detector)
    bridge = CoordinateBridge()
    tracker = Tracker(detector=detector, bridge=bridge, config=cfg)
    poses = PoseEstimator(cfg.pose.params())
    renderer = DebugRenderer(span=cfg.eyeline.span, glasses=glasses_img)
    queue: "asyncio.Queue[str]" = asyncio.Queue()

    async def producer():
        for f in frames_from_config(cfg.capture, camera):
            res = tracker(f.image)
            pose = poses.update(bridge.read())
            snap = res.snapshot()
            if snap is not None and (jsonl or ws):
                snap.extra.update({"frame": f.index, "pose": pose.to_dict() if pose else None})
                line = snap.model_dump_json()
                if jsonl: typer.echo(line)
                if ws: await queue.put(line)
            if show:
                dbg = renderer.draw(f.image.copy(), tracker.landmarks, res.named, res.direction)
                cv2.imshow("EyewearKit", dbg)
                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break
            await asyncio.sleep(0)

    async def main():
        if ws:
            await run_alongside(producer(), ws_broadcast(queue))
        else:
            await producer()

    try:
        asyncio.run(main())
    except (RuntimeError, OSError) as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    finally:
        detector.close()
        if show: cv2.destroyAllWindows()
    print("[green]Done[/green]", f"{bridge.frames} frames with a face")

if __name__ == "__main__":
    app()
