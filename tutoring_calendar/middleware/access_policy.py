# tutoring_calendar/middleware/access_policy.py
# identity comes from the upstream auth layer (X-User-Id / X-User-Role)
# public paths pass through; the booking calendar is public
# anonymous → /login; wrong role area → own home
# default = allow

from typing import Optional

from fastapi import Request
from starlette.responses import RedirectResponse

PUBLIC_PREFIXES = (
    "/login",
    "/register",
    "/calendar",
    "/catalog",
    "/health",
    "/docs",
    "/openapi.json",
)

ROLE_HOME = {
    "admin": "/admin",
    "tutor": "/tutor",
}
FALLBACK_HOME = "/dashboard"
ROLES = ("admin", "tutor", "pending")


def read_identity(request: Request) -> dict:
    user_id = request.headers.get("X-User-Id")
    role = request.headers.get("X-User-Role")
    if role not in ROLES:
        role = None
    return {"user_id": user_id, "role": role if user_id else None}


def is_public_path(path: str) -> bool:
    return path.startswith(PUBLIC_PREFIXES)


def resolve_redirect(path: str, user_id: Optional[str], role: Optional[str]) -> Optional[str]:
    """Where to send the user instead of ``path``; None means let through."""
    if not user_id:
        return None if is_public_path(path) else "/login"

    if path in ("/login", "/"):
        return ROLE_HOME.get(role, FALLBACK_HOME)

    if role == "admin" and path.startswith("/tutor"):
        return "/admin"
    if role == "tutor" and path.startswith("/admin"):
        return "/tutor"

    if path.startswith("/dashboard") and role in ROLE_HOME:
        return ROLE_HOME[role]

    return None


async def access_policy_middleware(request: Request, call_next):
    identity = read_identity(request)
    request.state.identity = identity

    target = resolve_redirect(request.url.path, identity["user_id"], identity["role"])
    if target is not None and target != request.url.path:
        return RedirectResponse(url=target, status_code=307)

    return await call_next(request)
