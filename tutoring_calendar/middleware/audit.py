# tutoring_calendar/middleware/audit.py
# writes: method / path / status; role; IP / UA; processing time
# never blocks the request

import json
import logging
import time

from fastapi import Request

logger = logging.getLogger("calendar.audit")


async def audit_middleware(request: Request, call_next):
    start_ts = time.time()

    response = await call_next(request)

    duration_ms = int((time.time() - start_ts) * 1000)
    identity = getattr(request.state, "identity", None) or {}

    record = {
        "ts": int(start_ts),
        "method": request.method,
        "path": request.url.path,
        "status": response.status_code,
        "role": identity.get("role") or "anonymous",
        "ip": request.headers.get("X-Real-IP") or (request.client.host if request.client else None),
        "ua": request.headers.get("User-Agent", ""),
        "duration_ms": duration_ms,
    }

    logger.info(json.dumps(record, ensure_ascii=False))

    return response
