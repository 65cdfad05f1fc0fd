import os
from sqlalchemy import or_, select
from dms.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class Document(BaseModel, TenantMixin):
    __tablename__ = "documents"

    title = db.Column(db.String(255), nullable=False)
    filename = db.Column(db.String(255), nullable=True)
    file_url = db.Column(db.String(512), nullable=True)
    thumbnail_url = db.Column(db.String(512), nullable=True)

    # Hidden until a page exposing it is published; cleared on publish
    embargoed_until_published = db.Column(db.Boolean, nullable=False, default=False)

    links = db.relationship(
        "DocumentSetDocument",
        back_populates="document",
        cascade="all, delete-orphan",
    )

    @property
    def extension(self) -> str:
        if not self.filename or "." not in self.filename:
            return ""
        return os.path.splitext(self.filename)[1].lstrip(".").lower()

    @property
    def document_sets(self):
        return [link.document_set for link in self.links]

    def related_pages(self):
        """
        Pages that expose this document through one of their document sets.

        A page counts while it still exists on either stage: its draft
        record is not deleted, or it is published.
        """
        from .page import Page
        from .document_set import DocumentSet, DocumentSetDocument

        owning_pages = (
            select(DocumentSet.page_id)
            .join(DocumentSetDocument, DocumentSetDocument.document_set_id == DocumentSet.id)
            .where(
                DocumentSetDocument.document_id == self.id,
                DocumentSet.page_id.is_not(None),
            )
        )

        return (
            Page.query
            .filter(
                Page.id.in_(owning_pages),
                or_(Page.deleted_at.is_(None), Page.status == "published"),
            )
            .order_by(Page.title.asc())
            .all()
        )

    def related_pages_count(self) -> int:
        return len(self.related_pages())
