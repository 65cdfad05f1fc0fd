from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from dms.extensions import db
from dms.models.page import Page
from dms.plugins.context import HookContext
from dms.domain.invariants.page import assert_page
from dms.utils.audit import log_action
from dms.utils.transaction import transactional


def create_page(
    *,
    context: HookContext,
    data: Dict[str, Any],
) -> Page:
    """
    Create a new CMS page in DRAFT state.

    Edge cases handled:
    - Missing required fields
    - Duplicate slug per tenant
    - Invariant violations
    """

    title: str | None = data.get("title")
    slug: str | None = data.get("slug")

    if not title or not slug:
        raise ValueError("Both title and slug are required")

    page = Page()
    page.tenant_id = context.tenant_id
    page.title = title
    page.slug = slug
    page.status = "draft"
    page.seo = data.get("seo") or {}
    try:
        with transactional():
            db.session.add(page)
            db.session.flush()  # ensures page.id is available

            assert_page(page)

            log_action(
                tenant_id=context.tenant_id,
                actor_id=context.actor_id,
                action="page.create",
                entity_type="page",
                entity_id=page.id,
                payload={
                    "title": page.title,
                    "slug": page.slug,
                    "status": page.status,
                },
            )

        return page

    except IntegrityError as exc:
        # Typically raised by unique constraints (e.g., tenant_id + slug)
        raise ValueError("A page with this slug already exists") from exc
