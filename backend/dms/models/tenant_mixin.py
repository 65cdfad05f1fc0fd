from dms.extensions import db

class TenantMixin:
    tenant_id = db.Column(
        db.String(36),
        db.ForeignKey('tenants.id'),
        nullable=False,
        index=True
    )

    @classmethod
    def for_tenant(cls, tenant_id):
        """Base query scoped to one tenant's rows."""
        return cls.query.filter(cls.tenant_id == tenant_id)
