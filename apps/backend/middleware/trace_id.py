"""Per-request trace id stored on the ASGI scope."""
import uuid

SCOPE_KEY = "trace_id"


def ensure_trace_id(scope: dict) -> str:
    """Return the request's trace id, creating it on first use."""
    tid = scope.get(SCOPE_KEY)
    if tid and isinstance(tid, str):
        return tid
    tid = uuid.uuid4().hex[:16]
    scope[SCOPE_KEY] = tid
    return tid
