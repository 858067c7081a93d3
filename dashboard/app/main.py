# dashboard/app/main.py
from pathlib import Path
from typing import List

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, PlainTextResponse

from collector.errors import EngineUnreachableError
from .engine import close_engine, init_engine
from .schemas import ContainerStatsOut

DASHBOARD_HTML = Path(__file__).with_name("static") / "index.html"

app = FastAPI(title="Docker Container Monitor")


@app.on_event("startup")
def startup():
    init_engine()


@app.on_event("shutdown")
def shutdown():
    close_engine()


# sync handlers run in the threadpool, so each request polls without blocking the loop
@app.get("/api/stats", response_model=List[ContainerStatsOut])
def api_stats():
    collector = init_engine()
    try:
        batch = collector.collect()
    except EngineUnreachableError as exc:
        return PlainTextResponse(exc.message, status_code=500)
    return [ContainerStatsOut.from_metrics(m) for m in batch]


@app.get("/", response_class=HTMLResponse)
def dashboard():
    return HTMLResponse(DASHBOARD_HTML.read_text(encoding="utf-8"))
