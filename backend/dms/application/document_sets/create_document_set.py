from typing import Optional
from dms.extensions import db
from dms.models.document_set import DocumentSet
from dms.models.page import Page
from dms.plugins.context import HookContext
from dms.utils.audit import log_action
from dms.utils.transaction import transactional


def create_document_set(
    *,
    context: HookContext,
    title: Optional[str],
    page_id: Optional[str] = None,
) -> DocumentSet:
    """
    Create a document set, either unassigned or owned by ``page_id``.
    New sets are appended after the page's existing sets.
    """
    if not title:
        raise ValueError("Document set title is required")

    page = None
    if page_id is not None:
        page = Page.query.filter_by(
            id=page_id,
            tenant_id=context.tenant_id,
            deleted_at=None,
        ).first()
        if not page:
            raise ValueError("Page not found")

    document_set = DocumentSet()
    document_set.tenant_id = context.tenant_id
    document_set.title = title
    document_set.page_id = page.id if page else None
    document_set.sort_order = _next_sort_order(context.tenant_id, page)

    with transactional():
        db.session.add(document_set)
        db.session.flush()

        log_action(
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            action="document_set.create",
            entity_type="document_set",
            entity_id=document_set.id,
            payload={"title": title, "page_id": document_set.page_id},
        )

    return document_set


def _next_sort_order(tenant_id, page) -> int:
    if page is None:
        return 0

    max_order = db.session.query(db.func.max(DocumentSet.sort_order))\
        .filter_by(page_id=page.id, tenant_id=tenant_id)\
        .scalar() or 0
    return max_order + 1
