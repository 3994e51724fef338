from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from .config import load_settings
from .graph import Graph, Mode
from .logger import log_event
from .paths import distinct_nodes
from .render import display_values, format_path, format_value, to_jsonable
from .samples import get_sample, list_samples
from .solver import solve


APP_VERSION = "0.1.0"
SETTINGS = load_settings()
app = FastAPI(title="Bellman Trace API", version=APP_VERSION)

# Summary of the last run, surfaced by /api/status
LAST_RUN: Dict[str, Any] | None = None


class EdgeIn(BaseModel):
    source: str
    target: str
    weight: float


class RunRequest(BaseModel):
    nodes: List[str]
    edges: List[EdgeIn] = Field(default_factory=list)
    source: str
    target: Optional[str] = None
    mode: str = "min"


class UpdateOut(BaseModel):
    source: str
    target: str
    weight: float
    old_value: Optional[float]
    new_value: float


class StepOut(BaseModel):
    iteration: int
    values: Dict[str, Optional[float]]
    display: Dict[str, str]
    updates: List[UpdateOut]


class RunResponse(BaseModel):
    ok: bool
    reason: str
    mode: str
    source: str
    target: Optional[str]
    has_cycle: bool
    iterations: int
    values: Dict[str, Optional[float]]
    display: Dict[str, str]
    predecessors: Dict[str, Optional[str]]
    path: List[str]
    paths: List[List[str]]
    paths_truncated: bool
    path_nodes: List[str]
    cost: Optional[float]
    cost_display: str
    steps: List[StepOut]


def _build_graph(req: RunRequest) -> Graph:
    if len(req.nodes) > SETTINGS.max_nodes:
        raise ValueError(f"too many nodes: {len(req.nodes)} > {SETTINGS.max_nodes}")
    return Graph.from_edges(req.nodes, [(e.source, e.target, e.weight) for e in req.edges])


@app.post("/api/run", response_model=RunResponse)
def api_run(req: RunRequest):
    try:
        mode = Mode.parse(req.mode)
        graph = _build_graph(req)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    report = solve(graph, req.source, req.target, mode, log=False, max_paths=SETTINGS.max_paths)
    if report.result is None:
        raise HTTPException(status_code=400, detail=report.reason)
    result = report.result

    steps = [
        StepOut(
            iteration=r.iteration,
            values=to_jsonable(r.values),
            display=display_values(r.values),
            updates=[UpdateOut(**to_jsonable(u)) for u in r.updates],
        )
        for r in report.trace
    ]
    response = RunResponse(
        ok=report.ok,
        reason=report.reason,
        mode=mode.value,
        source=req.source,
        target=req.target,
        has_cycle=result.has_cycle,
        iterations=result.iterations,
        values=to_jsonable(result.values),
        display=display_values(result.values),
        predecessors=to_jsonable(result.predecessors),
        path=report.path,
        paths=report.paths,
        paths_truncated=report.paths_truncated,
        path_nodes=distinct_nodes(report.paths),
        cost=to_jsonable(report.cost),
        cost_display=format_value(report.cost),
        steps=steps,
    )
    global LAST_RUN
    LAST_RUN = {"ok": report.ok, "reason": report.reason, "path": format_path(report.path), "cost": response.cost}
    log_event("api_run", ok=report.ok, reason=report.reason, mode=mode.value, iterations=result.iterations, path=report.path)
    return response


@app.get("/api/samples")
def api_samples():
    return {
        "samples": [
            {"name": s.name, "description": s.description, "source": s.source, "target": s.target}
            for s in list_samples()
        ]
    }


@app.get("/api/samples/{name}")
def api_sample(name: str):
    try:
        s = get_sample(name)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0]))
    return {
        "name": s.name,
        "description": s.description,
        "nodes": list(s.graph.nodes),
        "edges": [to_jsonable(e) for e in s.graph.edges],
        "source": s.source,
        "target": s.target,
    }


@app.middleware("http")
async def log_requests(request: Request, call_next):
    req_id = request.headers.get("X-Request-Id") or _new_id()
    log_event("http_request", method=request.method, path=request.url.path, request_id=req_id, run_id=SETTINGS.run_id)
    response = await call_next(request)
    response.headers["X-Request-Id"] = req_id
    response.headers["X-Run-Id"] = SETTINGS.run_id
    log_event("http_response", path=request.url.path, status=response.status_code, request_id=req_id, run_id=SETTINGS.run_id)
    return response


def _new_id() -> str:
    return str(uuid.uuid4())


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/status")
def status():
    info: Dict[str, Any] = {"status": "ok", "version": APP_VERSION, "run_id": SETTINGS.run_id}
    if LAST_RUN is not None:
        info["last_run"] = LAST_RUN
    return info
