from dataclasses import dataclass, replace
from typing import Optional

from flask import current_app, g

from dms.domain.lifecycle.page import Stage
from dms.models.user import User


@dataclass(frozen=True)
class HookContext:
    """Who is acting, on which stage, with which feature switches."""

    tenant_id: str
    current_user: Optional[User] = None
    current_stage: Stage = Stage.DRAFT
    documents_enabled: bool = True

    @property
    def actor_id(self) -> Optional[str]:
        return self.current_user.id if self.current_user is not None else None

    def on_stage(self, stage: Stage) -> "HookContext":
        return replace(self, current_stage=stage)


def context_from_request(stage: Stage = Stage.DRAFT) -> HookContext:
    """Build a context at the HTTP edge; services never read ``g`` themselves."""
    return HookContext(
        tenant_id=g.current_tenant.id,
        current_user=getattr(g, "current_user", None),
        current_stage=stage,
        documents_enabled=bool(current_app.config.get("DOCUMENTS_ENABLED", True)),
    )
