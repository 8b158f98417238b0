from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import Any

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import MethodNotAllowed

from scraper.config import load_config
from scraper.diagnostics import Diagnostics
from scraper.fallback import fallback_results
from scraper.provider import LottoResultProvider, ProviderResponse
from scraper.service import build_provider
from scraper.types import CacheInfo, HandlerState

from ..schemas import LottoEnvelope, LottoResultModel

bp = Blueprint("lotto", __name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@lru_cache(maxsize=1)
def get_result_provider() -> LottoResultProvider:
    return build_provider(load_config())


def _debug_requested() -> bool:
    return str(request.args.get("debug", "")).lower() in {"1", "true"}


def _validated(payload: Any, debug: bool) -> Any:
    if debug:
        return LottoEnvelope.model_validate(payload).model_dump(by_alias=True, exclude_none=True)
    return [
        LottoResultModel.model_validate(item).model_dump(by_alias=True, exclude_none=True)
        for item in payload
    ]


def _handler_error_response(exc: Exception, debug: bool) -> ProviderResponse:
    diagnostics = Diagnostics(source_url="handler", used_fallback=True)
    diagnostics.fail("api_error", exc)
    diagnostics.add_step("fallback_used", True, "Handler error")
    return ProviderResponse(
        results=fallback_results(diagnostics.to_json() if debug else None),
        diagnostics=diagnostics,
        cache=CacheInfo(used=False, age_ms=0, last_fetch_time=0),
        state=HandlerState.FETCH_FAILED,
    )


def _method_not_allowed(method: str):
    return f"Method {method} Not Allowed", 405, {"Allow": "GET", **CORS_HEADERS}


@bp.after_request
def add_cors_headers(response):
    response.headers.update(CORS_HEADERS)
    return response


@bp.app_errorhandler(MethodNotAllowed)
def reject_unrouted_method(exc: MethodNotAllowed):
    # Methods missing from the route's list never reach the view or the blueprint hooks.
    if request.path != "/api/lotto":
        return exc
    return _method_not_allowed(request.method)


@bp.route("/api/lotto", methods=["GET", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"])
def get_lotto():
    if request.method == "OPTIONS":
        return "", 200
    if request.method not in ("GET", "HEAD"):
        return _method_not_allowed(request.method)

    debug = _debug_requested()
    try:
        response = asyncio.run(get_result_provider().get_results(debug=debug))
        body = _validated(response.to_payload(debug), debug)
    except Exception as exc:
        current_app.logger.exception("API error, returning fallback data: %s", exc)
        body = _validated(_handler_error_response(exc, debug).to_payload(debug), debug)

    results = body["results"] if debug else body
    current_app.logger.info(
        "Returning %s results, isLive: %s", len(results), results[0]["isLive"] if results else None
    )
    return jsonify(body)
