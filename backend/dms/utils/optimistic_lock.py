from flask import abort
from datetime import timezone
from dateutil.parser import parse, ParserError


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(entity, client_header):
    """
    Enforces optimistic locking using an If-Unmodified-Since value.
    Aborts with 409 Conflict if the entity has been modified since.
    """
    if not client_header:
        return  # No optimistic lock requested

    try:
        client_ts = normalize_ts(parse(client_header))
    except (ParserError, OverflowError, ValueError):
        abort(400, description="Invalid If-Unmodified-Since header")

    if entity.updated_at is None:
        return

    # HTTP dates carry whole seconds only
    server_ts = normalize_ts(entity.updated_at).replace(microsecond=0)

    if server_ts > client_ts:
        abort(
            409,
            description="Conflict detected. Document has been modified."
        )
