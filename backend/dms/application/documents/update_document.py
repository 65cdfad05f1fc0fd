from typing import Any, Dict, Optional
from dms.models.document import Document
from dms.plugins.context import HookContext
from dms.utils.audit import log_action
from dms.utils.optimistic_lock import enforce_optimistic_lock
from dms.utils.transaction import transactional


ALLOWED_UPDATE_FIELDS = ("title", "embargoed_until_published")


def update_document(
    *,
    document_id: str,
    context: HookContext,
    data: Dict[str, Any],
    if_unmodified_since: Optional[str] = None,
) -> Document:
    document = Document.query.filter_by(
        id=document_id,
        tenant_id=context.tenant_id,
    ).first()

    if not document:
        raise ValueError("Document not found")

    enforce_optimistic_lock(document, if_unmodified_since)

    changed_fields: list[str] = []

    with transactional():
        for field in ALLOWED_UPDATE_FIELDS:
            if field in data and getattr(document, field) != data[field]:
                setattr(document, field, data[field])
                changed_fields.append(field)

        if not changed_fields:
            raise ValueError("No valid fields provided for update")

        if not document.title:
            raise ValueError("Document title cannot be empty")

        log_action(
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            action="document.update",
            entity_type="document",
            entity_id=document.id,
            payload={"fields": changed_fields},
        )

    return document
