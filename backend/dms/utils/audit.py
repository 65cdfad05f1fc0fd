from dms.extensions import db
from dms.models.audit_log import AuditLog
from typing import Optional

def log_action(
    *,
    tenant_id: str,
    actor_id: Optional[str],
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None
) -> AuditLog:
    """
    Stage an audit entry in the current session.

    Context is passed in explicitly so services and page hooks can be
    called outside of a request.
    """
    log = AuditLog()

    log.actor_id = actor_id
    log.tenant_id = tenant_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id or "*"
    log.payload = payload or {}

    db.session.add(log)
    return log
