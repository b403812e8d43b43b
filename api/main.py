"""QuantAI Signal — FastAPI REST API with background poller."""
import json
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, FastAPI, Header, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from common.entitlements import EntitlementProvider, StaticEntitlementProvider
from common.logger import get_logger
from config.settings import POLL_INTERVAL_SEC
from scanner.cycle import make_ingestor, run_scan_cycle
from scanner.poller import Poller
from scanner.views import SignalFilter, SortKey, filter_and_sort, scores_payload, summarize, to_detail, to_row
from storage.latest import store

logger = get_logger("api")


class ConnectionManager:
    """Manages active WebSocket connections and broadcasts messages."""

    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, payload: dict):
        message = json.dumps(payload)
        dead = []
        for ws in list(self.active_connections):
            try:
                await ws.send_text(message)
            except Exception:
                dead.append(ws)
        for ws in dead:
            self.disconnect(ws)


manager = ConnectionManager()
entitlements: EntitlementProvider = StaticEntitlementProvider()
ingestor = make_ingestor()


async def scan_cycle():
    return await run_scan_cycle(ingestor, store, notify=manager.broadcast)


poller = Poller(scan_cycle, interval=POLL_INTERVAL_SEC)


@asynccontextmanager
async def lifespan(app: FastAPI):
    poller.start()
    yield
    await poller.stop()

app = FastAPI(title="QuantAI Signal API", version="1.0.0", lifespan=lifespan)

app.add_middleware(CORSMiddleware,
    allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# ── API routes (on a shared router, mounted at both "/" and "/api") ───────────

router = APIRouter()

@router.get("/health")
def health():
    latest = store.latest
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "last_scan": latest.timestamp.isoformat() if latest else None,
        "scanning": poller.busy,
    }

@router.get("/scores")
def get_scores(signal: SignalFilter = SignalFilter.ALL, sort: SortKey = SortKey.SCORE):
    """Latest scan, filtered by signal and sorted descending by the chosen key."""
    latest = store.latest
    if latest is None:
        return {"scores": [], "count": 0, "error": store.last_error,
                "note": "No scores yet, scan in progress..."}
    rows = [to_row(a) for a in filter_and_sort(latest.assets, signal, sort)]
    return {"scores": rows, "count": len(rows), "page": latest.page,
            "timestamp": latest.timestamp.isoformat(), "error": store.last_error}

@router.get("/scores/{asset_id}")
def get_score(asset_id: str):
    latest = store.latest
    assets = latest.assets if latest else ()
    for a in assets:
        if a.snapshot.id == asset_id:
            return to_detail(a)
    raise HTTPException(404, f"No analysis for {asset_id}")

@router.get("/summary")
def get_summary():
    latest = store.latest
    return summarize(latest.assets if latest else ())

@router.post("/scan/refresh")
async def trigger_refresh():
    """Manually trigger a scan ("Scan Now"). Skipped if one is already running."""
    if poller.busy:
        return {"status": "scan already in progress"}
    poller.trigger_in_background()
    return {"status": "scan triggered"}

@router.get("/me")
def get_me(x_user_email: Optional[str] = Header(default=None)):
    return {"email": x_user_email, "pro": entitlements.is_pro(x_user_email)}

# Mount routes at root (for nginx) and at /api (for direct browser access)
app.include_router(router)
app.include_router(router, prefix="/api")

# ── WebSocket ─────────────────────────────────────────────────────────────────

@app.websocket("/ws/live")
async def websocket_live(websocket: WebSocket):
    """WebSocket endpoint — pushes the latest scan, then every new one."""
    await manager.connect(websocket)
    try:
        latest = store.latest
        if latest is not None:
            await websocket.send_text(json.dumps(scores_payload(latest)))
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception:
        manager.disconnect(websocket)
