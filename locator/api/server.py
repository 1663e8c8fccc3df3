from __future__ import annotations
from flask import Flask, request, jsonify
from pathlib import Path

from locator.config.env import GeocodingConfig, get_geocoding_config, get_log_level
from locator.resolver.core import (
    Failed,
    LocationValidation,
    NotFound,
    resolve_location,
    validate_query,
)
from locator.resolver.errors import GENERIC_FAILURE_MESSAGE, ValidationError

import os
import time
import json
import logging
from collections import deque, defaultdict

logger = logging.getLogger(__name__)

app = Flask(__name__)

OPENAPI_PATH = Path(__file__).with_name('openapi.json')

# Configuration helpers (overridable via app.config in tests)

def _get_geocoding_config() -> GeocodingConfig:
    cfg = app.config.get('GEOCODING_CONFIG')
    if cfg is not None:
        return cfg
    return get_geocoding_config()


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None:
        n = int(os.environ.get('RATE_LIMIT_N', '30'))
    if w is None:
        w = float(os.environ.get('RATE_LIMIT_WINDOW_SEC', '1.0'))
    return int(n), float(w)

def _trust_proxy() -> bool:
    trusted = app.config.get('TRUST_PROXY')
    if trusted is None:
        trusted = os.environ.get('TRUST_PROXY', '0').lower() in ('1', 'true', 'yes')
    return bool(trusted)

_recent: dict[str, deque[float]] = defaultdict(lambda: deque(maxlen=100))
# Above this many tracked clients, idle entries are swept on the next request
_MAX_TRACKED_CLIENTS = 10_000


def _client_ip() -> str:
    # X-Forwarded-For is client-controlled; only honour it behind a trusted proxy
    xff = request.headers.get('X-Forwarded-For') if _trust_proxy() else None
    if xff:
        return xff.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _sweep_idle(now: float, window: float) -> None:
    for key in [k for k, dq in _recent.items() if not dq or now - dq[-1] > window]:
        del _recent[key]


def _check_rate_limit(ip: str):
    # Allow if rate limiting disabled or N <= 0
    n, window = _get_rate_limit()
    if n <= 0:
        return None
    now = time.time()
    if len(_recent) > _MAX_TRACKED_CLIENTS:
        _sweep_idle(now, window)
    dq = _recent[ip]
    # Drop old entries outside window
    while dq and now - dq[0] > window:
        dq.popleft()
    if len(dq) >= n:
        retry = max(0.0, window - (now - dq[0]))
        resp = jsonify({'error': 'rate_limited'})
        resp.status_code = 429
        resp.headers['Retry-After'] = f"{retry:.2f}"
        return resp
    dq.append(now)
    return None

@app.before_request
def _rate_limit():
    # Every lookup costs an upstream call; throttle per client
    if request.path == '/api/location':
        return _check_rate_limit(_client_ip())
    return None


def _body(success: bool, query: str, message: str, results=None, exact_match: bool = False) -> dict:
    return {
        'success': success,
        'query': query,
        'results': results or [],
        'exact_match': exact_match,
        'message': message,
    }


async def _validate_location(location) -> tuple[dict, int]:
    if not location or not isinstance(location, str):
        return _body(False, location if isinstance(location, str) else '', 'Location name is required'), 400
    try:
        query = validate_query(location)
    except ValidationError as e:
        return _body(False, location.strip(), e.message), 400

    try:
        outcome = await resolve_location(query, _get_geocoding_config())
    except Exception:
        logger.exception("Location validation error for %r", query)
        return _body(False, query, GENERIC_FAILURE_MESSAGE), 500

    body = LocationValidation.from_outcome(outcome).to_dict()
    if isinstance(outcome, Failed):
        return body, 500
    if isinstance(outcome, NotFound) and outcome.invalid:
        return body, 400
    return body, 200


@app.post('/api/location')
async def post_location():
    payload = request.get_json(force=True, silent=True) or {}
    location = payload.get('location') if isinstance(payload, dict) else None
    body, status = await _validate_location(location)
    return jsonify(body), status


@app.get('/api/location')
async def get_location():
    location = request.args.get('location')
    if not location:
        return jsonify(_body(False, '', 'Location query parameter is required')), 400
    body, status = await _validate_location(location)
    return jsonify(body), status


# OpenAPI document for the location endpoint (static JSON next to this module)
@app.get('/openapi.json')
def get_openapi():
    try:
        spec = json.loads(OPENAPI_PATH.read_text())
        return jsonify(spec)
    except (OSError, ValueError):
        return jsonify({'error': 'openapi_not_found'}), 404


if __name__ == '__main__':
    logging.basicConfig(level=get_log_level())
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', '8000')))
