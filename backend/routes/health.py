from __future__ import annotations

from flask import Blueprint, jsonify

from .lotto import get_result_provider

bp = Blueprint("health", __name__)


@bp.get("/healthz")
def healthz():
    provider = get_result_provider()
    snapshot = provider.cache.get()
    return jsonify({
        "ok": True,
        "source": provider.source_url,
        "cached": len(snapshot.results) if snapshot else 0,
    })
