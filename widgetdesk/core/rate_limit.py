import threading
import time
from collections import defaultdict

from fastapi import HTTPException, Request

from widgetdesk.core.config import settings

# janela fixa de 1 minuto em memória: key -> {minuto: contagem}
_rate_counters: dict[str, dict[int, int]] = defaultdict(lambda: defaultdict(int))
_last_sweep = {"minute": 0}
_lock = threading.Lock()


def reset_rate_limit() -> None:
    with _lock:
        _rate_counters.clear()
        _last_sweep["minute"] = 0


def _sweep(now_min: int) -> None:
    # chamado com _lock; uma vez por minuto descarta clientes sem contagem no minuto atual
    if _last_sweep["minute"] == now_min:
        return
    _last_sweep["minute"] = now_min
    for key in [k for k, bucket in _rate_counters.items() if now_min not in bucket]:
        del _rate_counters[key]


def enforce_rate_limit(key: str, limit: int) -> None:
    now_min = int(time.time() // 60)
    with _lock:
        _sweep(now_min)
        bucket = _rate_counters[key]
        for k in list(bucket.keys()):
            if k != now_min:
                bucket.pop(k, None)
        bucket[now_min] += 1
        count = bucket[now_min]
    if count > limit:
        raise HTTPException(status_code=429, detail="Too many requests, please try again later.")


def chat_rate_limit(request: Request) -> None:
    if not settings.RATE_LIMIT_ENABLED:
        return
    client_ip = request.client.host if request.client else "anon"
    enforce_rate_limit(f"chat:{client_ip}", settings.RATE_LIMIT_PER_MIN)
