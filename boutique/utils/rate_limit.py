from typing import Any, Dict, List, Tuple
from fastapi import Request, Response, HTTPException
import os
import time
import hashlib

SESSION_COOKIE_NAME = "session"

_clock = time.time

def _sweep(store: Dict[str, Tuple[int, List[float]]], now: float) -> Dict[str, Tuple[int, List[float]]]:
    # Une clé dont le dernier hit est sorti de sa fenêtre ne sert plus
    return {k: (window, hits) for k, (window, hits) in store.items() if hits and now - hits[-1] < window}

def _client_key(req: Request) -> str:
    # Priorité: cookie de session (hashé) puis IP, toujours suffixé par le chemin
    token = req.cookies.get(SESSION_COOKIE_NAME)
    path = req.url.path
    if token:
        h = hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]
        return f"session:{h}:{path}"
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{path}"

def optional_rate_limit(times: int, seconds: int):
    async def _dep(request: Request, response: Response):
        # Fallback mémoire en DEV si demandé
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = _clock()
            key = _client_key(request)
            store = _sweep(getattr(request.app.state, "_rl_store", {}), now)
            request.app.state._rl_store = store
            _, previous = store.get(key, (seconds, []))
            hits = [t for t in previous if now - t < seconds]
            if len(hits) >= times:
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = (seconds, hits)
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return

        try:
            from fastapi_limiter.depends import RateLimiter
            async def _identifier(req: Request) -> str:
                return _client_key(req)
            return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception:
            # fastapi-limiter non initialisé ou Redis indisponible: pas de 429 en prod
            return
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    limiter_ready = False
    try:
        from fastapi_limiter import FastAPILimiter
        limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    except Exception:
        limiter_ready = False
    return {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": "redis" if limiter_ready else None,
    }
