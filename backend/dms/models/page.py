from dms.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin
from .soft_delete_mixin import SoftDeleteMixin

class Page(BaseModel, TenantMixin, SoftDeleteMixin):
    __tablename__ = 'pages'

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    status = db.Column(db.String(50), default='draft', index=True)
    seo = db.Column(db.JSON(none_as_null=True), default=dict)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_page_slug_per_tenant"),
    )

    # Owned document sets; unlinking a set leaves it unassigned, never deletes it
    document_sets = db.relationship(
        "DocumentSet",
        back_populates="page",
        order_by="DocumentSet.sort_order",
    )

    @property
    def exists_on_live(self) -> bool:
        return self.status == "published"

    @property
    def is_deleted_from_stage(self) -> bool:
        """True once the draft record is gone (soft-deleted)."""
        return self.is_deleted
