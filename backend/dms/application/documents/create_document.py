from typing import Optional
from dms.extensions import db
from dms.models.document import Document
from dms.plugins.context import HookContext
from dms.utils.audit import log_action
from dms.utils.media import save_file, delete_file
from dms.utils.transaction import transactional


def create_document(
    *,
    context: HookContext,
    file=None,
    title: Optional[str] = None,
    embargoed_until_published: bool = False,
) -> Document:
    """
    Store an uploaded file and register it as a document.

    A title falls back to the uploaded filename. The stored file is
    removed again if the row cannot be written.
    """
    filename = getattr(file, "filename", None) if file is not None else None
    title = title or filename
    if not title:
        raise ValueError("A title or a file is required")

    file_url = save_file(file) if file is not None else None

    document = Document()
    document.tenant_id = context.tenant_id
    document.title = title
    document.filename = filename
    document.file_url = file_url
    document.embargoed_until_published = bool(embargoed_until_published)

    try:
        with transactional():
            db.session.add(document)
            db.session.flush()

            log_action(
                tenant_id=context.tenant_id,
                actor_id=context.actor_id,
                action="document.create",
                entity_type="document",
                entity_id=document.id,
                payload={
                    "title": document.title,
                    "embargoed_until_published": document.embargoed_until_published,
                },
            )
    except Exception:
        if file_url:
            delete_file(file_url)
        raise

    return document
