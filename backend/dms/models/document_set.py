from dms.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class DocumentSet(BaseModel, TenantMixin):
    __tablename__ = "document_sets"

    title = db.Column(db.String(255), nullable=False)

    # NULL means unassigned: the set can still be attached to a page
    page_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=True, index=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)

    page = db.relationship("Page", back_populates="document_sets")

    links = db.relationship(
        "DocumentSetDocument",
        back_populates="document_set",
        order_by="DocumentSetDocument.sort_order",
        cascade="all, delete-orphan",
    )

    @property
    def documents(self):
        return [link.document for link in self.links]

    @property
    def is_assigned(self) -> bool:
        return self.page_id is not None


class DocumentSetDocument(BaseModel):
    __tablename__ = "document_set_documents"

    document_set_id = db.Column(
        db.String(36), db.ForeignKey("document_sets.id"), nullable=False, index=True
    )
    document_id = db.Column(
        db.String(36), db.ForeignKey("documents.id"), nullable=False, index=True
    )
    sort_order = db.Column(db.Integer, nullable=False, default=0)

    document_set = db.relationship("DocumentSet", back_populates="links")
    document = db.relationship("Document", back_populates="links")

    __table_args__ = (
        db.UniqueConstraint("document_set_id", "document_id", name="uq_document_set_document"),
    )
