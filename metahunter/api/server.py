from __future__ import annotations
from flask import Flask, request, jsonify
from metahunter.api.orchestrator import hunt
from metahunter.config.env import get_server_config

import json
import logging
import time
from collections import deque
from pathlib import Path

app = Flask(__name__)

OPENAPI_PATH = Path(__file__).with_name('openapi.json')

# Configuration helpers: app.config wins (tests), else ServerConfig from env

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return get_server_config().api_key


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None or w is None:
        cfg = get_server_config()
        n = cfg.rate_limit_n if n is None else n
        w = cfg.rate_limit_window_sec if w is None else w
    return int(n), float(w)


def _trust_proxy() -> bool:
    if 'TRUST_PROXY' in app.config:
        return bool(app.config.get('TRUST_PROXY'))
    return get_server_config().trust_proxy

_recent: dict[str, deque[float]] = {}


def _client_ip() -> str:
    # X-Forwarded-For is client-controlled unless a proxy in front rewrites it
    if _trust_proxy():
        xff = request.headers.get('X-Forwarded-For')
        if xff:
            return xff.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return jsonify({'success': False, 'error': 'unauthorized'}), 401
    return None


def _prune_recent(now: float, window: float) -> None:
    # Drop entries outside the window, then forget idle clients
    for ip in list(_recent):
        dq = _recent[ip]
        while dq and now - dq[0] > window:
            dq.popleft()
        if not dq:
            del _recent[ip]


def _check_rate_limit(ip: str):
    # Allow if rate limiting disabled or N <= 0
    n, window = _get_rate_limit()
    if n <= 0:
        return None
    now = time.time()
    _prune_recent(now, window)
    dq = _recent.setdefault(ip, deque())
    if len(dq) >= n:
        retry = max(0.0, window - (now - dq[0]))
        resp = jsonify({'success': False, 'error': 'rate_limited'})
        resp.status_code = 429
        resp.headers['Retry-After'] = f"{retry:.2f}"
        return resp
    dq.append(now)
    return None

@app.before_request
def _auth_and_rate_limit():
    # Only enforce for API routes; health and openapi stay open
    if request.path.startswith('/api/'):
        unauthorized = _check_api_key()
        if unauthorized is not None:
            return unauthorized
        rl = _check_rate_limit(_client_ip())
        if rl is not None:
            return rl
    return None

@app.after_request
def _cors(resp):
    resp.headers.setdefault('Access-Control-Allow-Origin', '*')
    resp.headers.setdefault('Access-Control-Allow-Headers', 'Content-Type, X-API-Key')
    return resp

@app.get('/api/hunt')
def get_hunt():
    # Collaborators can be swapped through app.config (tests use fakes)
    envelope, status = hunt(
        generator=app.config.get('TEXT_GENERATOR'),
        client=app.config.get('DEX_CLIENT'),
    )
    return jsonify(envelope), status

@app.get('/healthz')
def healthz():
    return jsonify({'status': 'ok'})

@app.get('/openapi.json')
def get_openapi():
    try:
        spec = json.loads(OPENAPI_PATH.read_text())
    except (OSError, ValueError):
        return jsonify({'error': 'openapi_not_found'}), 404
    return jsonify(spec)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    app.run(host='0.0.0.0', port=get_server_config().port)
