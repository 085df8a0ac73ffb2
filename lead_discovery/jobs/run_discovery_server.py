"""HTTP entrypoint that runs discovery sessions in the background (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, Optional

from flask import Flask, jsonify, request

from lead_discovery.core.config import ConfigError, get_settings
from lead_discovery.discovery.errors import PreconditionError
from lead_discovery.discovery.models import BoundingBox, SearchSession, SearchSessionSnapshot, SessionState
from lead_discovery.discovery.session import SearchSessionOrchestrator
from lead_discovery.vendors import build_provider

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App & executor ----------
app = Flask(__name__)
_executor = ThreadPoolExecutor(max_workers=get_settings().session_workers)


@dataclass
class _SessionRecord:
    orchestrator: SearchSessionOrchestrator
    snapshot: SearchSessionSnapshot


# Written by one executor thread per session, read by request threads.
_sessions: Dict[str, _SessionRecord] = {}
_sessions_lock = threading.Lock()

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    settings = get_settings()
    with _sessions_lock:
        running = sum(1 for record in _sessions.values() if record.snapshot.in_progress)
    return (
        jsonify(
            {
                "status": "ok",
                "search_provider": settings.search_provider,
                "sessions_running": running,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/sessions")
def start_session() -> Any:
    """
    Start a discovery session.
    Required JSON fields: bounding_box {southwest, northeast}, categories (list)
    Optional: clip_to_bounding_box (bool)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    missing = [f for f in ("bounding_box", "categories") if not payload.get(f)]
    if missing:
        return jsonify({"error": f"missing fields: {', '.join(missing)}"}), 400

    categories = payload["categories"]
    if not isinstance(categories, list):
        return jsonify({"error": "categories must be a list"}), 400

    settings = get_settings()
    # clip_to_bounding_box (optional -> bool)
    clip = payload.get("clip_to_bounding_box", settings.clip_to_bounding_box)
    if not isinstance(clip, bool):
        return jsonify({"error": "clip_to_bounding_box must be a boolean"}), 400

    try:
        box = BoundingBox.from_dict(payload["bounding_box"])
        provider = build_provider(settings)
        orchestrator = SearchSessionOrchestrator(provider, clip_to_bounding_box=clip)
        stream = orchestrator.start_session(box, categories)
    except PreconditionError as exc:
        return jsonify({"error": str(exc)}), 400
    except ConfigError as exc:
        logger.error("Cannot start session: %s", exc)
        return jsonify({"error": "search provider is not configured"}), 503

    session_id = uuid.uuid4().hex
    initial = SearchSession(in_progress=True, state=SessionState.RUNNING).snapshot()
    with _sessions_lock:
        _sessions[session_id] = _SessionRecord(orchestrator=orchestrator, snapshot=initial)

    logger.info("Queueing discovery session %s: categories=%s", session_id, categories)
    _executor.submit(_run_session_safe, session_id, stream)

    return jsonify({"data": {"session_id": session_id, "status": "queued"}}), 202


@app.get("/sessions/<session_id>")
def get_session(session_id: str) -> Any:
    snapshot = _latest_snapshot(session_id)
    if snapshot is None:
        return jsonify({"error": "session not found"}), 404
    return jsonify({"data": {"session_id": session_id, **snapshot.to_dict()}}), 200


@app.post("/sessions/<session_id>/cancel")
def cancel_session(session_id: str) -> Any:
    with _sessions_lock:
        record = _sessions.get(session_id)
    if record is None:
        return jsonify({"error": "session not found"}), 404

    record.orchestrator.cancel_session()
    with _sessions_lock:
        snapshot = record.snapshot
    return jsonify({"data": {"session_id": session_id, **snapshot.to_dict()}}), 202


@app.delete("/sessions/<session_id>")
def discard_session(session_id: str) -> Any:
    """Drop a finished session once the caller has consumed its leads."""
    with _sessions_lock:
        record = _sessions.get(session_id)
        if record is None:
            return jsonify({"error": "session not found"}), 404
        if record.snapshot.in_progress:
            return jsonify({"error": "session is still running"}), 409
        del _sessions[session_id]
    return "", 204


# ---------- Internals ----------


def _latest_snapshot(session_id: str) -> Optional[SearchSessionSnapshot]:
    with _sessions_lock:
        record = _sessions.get(session_id)
        return record.snapshot if record is not None else None


def _run_session_safe(session_id: str, stream: Iterator[SearchSessionSnapshot]) -> None:
    try:
        for snapshot in stream:
            with _sessions_lock:
                record = _sessions.get(session_id)
                if record is not None:
                    record.snapshot = snapshot
    except Exception as exc:  # noqa: BLE001
        logger.exception("Discovery session %s failed: %s", session_id, exc)
        with _sessions_lock:
            record = _sessions.get(session_id)
            if record is not None:
                record.snapshot = replace(
                    record.snapshot, in_progress=False, progress_percent=100.0, state=SessionState.ABORTED
                )


def main() -> None:
    env_port = os.getenv("PORT")
    logger.info("[BOOT] ENV PORT=%s", env_port)

    port = int(env_port or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)

    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
