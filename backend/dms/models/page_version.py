from dms.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin

class PageVersion(BaseModel, TenantMixin):
    __tablename__ = "page_versions"

    page_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id"),
        nullable=False
    )

    version = db.Column(db.Integer, nullable=False)
    # published | unpublished
    status = db.Column(db.String(20), nullable=False)

    # Page fields plus its document sets and their document ids, see snapshot_page()
    snapshot = db.Column(db.JSON, nullable=False)

    created_by = db.Column(db.String(36), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("page_id", "version", name="uq_page_version"),
        db.Index("idx_page_version_page", "page_id"),
    )

    @property
    def document_ids(self):
        """Documents the page exposed at this version, first occurrence wins."""
        seen = []
        for document_set in (self.snapshot or {}).get("document_sets", []):
            for document in document_set.get("documents", []):
                if document["id"] not in seen:
                    seen.append(document["id"])
        return seen
