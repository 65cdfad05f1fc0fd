from typing import Optional
from sqlalchemy import inspect
from dms.extensions import db
from dms.models.document import Document
from dms.plugins.context import HookContext
from dms.utils.audit import log_action
from dms.utils.media import schedule_file_cleanup
from dms.utils.transaction import transactional


def destroy_document(
    document: Document,
    *,
    tenant_id: str,
    actor_id: Optional[str],
    reason: str = "manual",
) -> bool:
    """
    Stage deletion of a document, its set memberships and its stored file.

    Runs inside the caller's transaction. Returns False when the document
    is already deleted, so repeated calls are harmless.
    """
    state = inspect(document)
    if state.was_deleted or document in db.session.deleted:
        return False

    document_id = document.id
    schedule_file_cleanup(db.session, document.file_url)
    db.session.delete(document)

    log_action(
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="document.delete",
        entity_type="document",
        entity_id=document_id,
        payload={"reason": reason},
    )
    return True


def delete_document(
    *,
    document_id: str,
    context: HookContext,
) -> None:
    document = Document.query.filter_by(
        id=document_id,
        tenant_id=context.tenant_id,
    ).first()

    if not document:
        raise ValueError("Document not found")

    with transactional():
        destroy_document(
            document,
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
        )
