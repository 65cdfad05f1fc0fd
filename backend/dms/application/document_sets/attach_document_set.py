from dms.extensions import db
from dms.models.document_set import DocumentSet
from dms.models.page import Page
from dms.plugins.context import HookContext
from dms.domain.invariants.document_set import assert_document_set_assignable
from dms.utils.audit import log_action
from dms.utils.transaction import transactional


def _load(context: HookContext, page_id: str, document_set_id: str):
    page = Page.query.filter_by(
        id=page_id,
        tenant_id=context.tenant_id,
        deleted_at=None,
    ).first()
    if not page:
        raise ValueError("Page not found")

    document_set = DocumentSet.query.filter_by(
        id=document_set_id,
        tenant_id=context.tenant_id,
    ).first()
    if not document_set:
        raise ValueError("Document set not found")

    return page, document_set


def attach_document_set(
    *,
    page_id: str,
    document_set_id: str,
    context: HookContext,
) -> DocumentSet:
    """Add an existing, unassigned document set to a page."""
    page, document_set = _load(context, page_id, document_set_id)

    if document_set.page_id == page.id:
        return document_set

    with transactional():
        assert_document_set_assignable(document_set, page)

        max_order = db.session.query(db.func.max(DocumentSet.sort_order))\
            .filter_by(page_id=page.id, tenant_id=context.tenant_id)\
            .scalar() or 0

        document_set.page_id = page.id
        document_set.sort_order = max_order + 1

        log_action(
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            action="document_set.attach",
            entity_type="document_set",
            entity_id=document_set.id,
            payload={"page_id": page.id},
        )

    return document_set


def unlink_document_set(
    *,
    page_id: str,
    document_set_id: str,
    context: HookContext,
) -> DocumentSet:
    """Detach a set from its page. The set and its documents are kept."""
    page, document_set = _load(context, page_id, document_set_id)

    if document_set.page_id != page.id:
        raise ValueError("Document set is not attached to this page")

    with transactional():
        document_set.page_id = None
        document_set.sort_order = 0

        log_action(
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            action="document_set.unlink",
            entity_type="document_set",
            entity_id=document_set.id,
            payload={"page_id": page.id},
        )

    return document_set
