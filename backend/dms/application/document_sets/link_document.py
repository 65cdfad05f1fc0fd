from dms.extensions import db
from dms.models.document import Document
from dms.models.document_set import DocumentSet, DocumentSetDocument
from dms.plugins.context import HookContext
from dms.domain.invariants.document_set import assert_document_linkable
from dms.utils.audit import log_action
from dms.utils.transaction import transactional


class DocumentSetNotFound(LookupError):
    code = "document_set_not_found"


class DocumentNotFound(LookupError):
    code = "document_not_found"


def link_document(
    *,
    document_set_id: str,
    document_id: str,
    context: HookContext,
) -> DocumentSetDocument:
    """
    Append an existing document to a document set.

    Linking a document that is already in the set returns the existing
    link unchanged.
    """
    document_set = DocumentSet.query.filter_by(
        id=document_set_id,
        tenant_id=context.tenant_id,
    ).first()
    if not document_set:
        raise DocumentSetNotFound("Document set not found")

    document = Document.query.filter_by(
        id=document_id,
        tenant_id=context.tenant_id,
    ).first()
    if not document:
        raise DocumentNotFound("Document not found")

    existing = DocumentSetDocument.query.filter_by(
        document_set_id=document_set.id,
        document_id=document.id,
    ).first()
    if existing:
        return existing

    with transactional():
        assert_document_linkable(document_set, document)

        max_order = db.session.query(db.func.max(DocumentSetDocument.sort_order))\
            .filter_by(document_set_id=document_set.id)\
            .scalar() or 0

        link = DocumentSetDocument()
        link.document_set = document_set
        link.document = document
        link.sort_order = max_order + 1

        db.session.add(link)
        db.session.flush()

        log_action(
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            action="document_set.link_document",
            entity_type="document_set",
            entity_id=document_set.id,
            payload={"document_id": document.id, "sort_order": link.sort_order},
        )

    return link
