from __future__ import annotations

import asyncio
import datetime as dt

from flask import Blueprint, current_app, jsonify, render_template, request

from ..config import load_settings
from ..schemas import RevalidateResponse
from .lotto import get_result_provider

bp = Blueprint("pages", __name__)


def render_index() -> str:
    try:
        response = asyncio.run(get_result_provider().get_results())
        results = response.to_payload()
    except Exception as exc:
        current_app.logger.warning("Rendering home page without results: %s", exc)
        results = []
    generated_at = dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds")
    return render_template("index.html", results=results, generated_at=generated_at)


@bp.get("/")
def index():
    page = current_app.extensions.get("index_page")
    if page is None:
        return render_index()
    return page.get()


@bp.get("/api/revalidate")
def revalidate():
    secret = load_settings().revalidate_secret
    if not secret or request.args.get("secret") != secret:
        return jsonify({"message": "Invalid secret"}), 401

    page = current_app.extensions.get("index_page")
    if page is None:
        response = RevalidateResponse(revalidated=False, error="Revalidate not available")
        return jsonify(response.model_dump()), 500

    try:
        page.regenerate()
    except Exception as exc:
        current_app.logger.exception("Page regeneration failed: %s", exc)
        return jsonify(RevalidateResponse(revalidated=False, error=str(exc)).model_dump()), 500

    return jsonify(RevalidateResponse(revalidated=True).model_dump(exclude_none=True))
