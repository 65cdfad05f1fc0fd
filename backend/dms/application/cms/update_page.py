from typing import Any, Dict
from dms.models.page import Page
from dms.plugins.context import HookContext
from dms.domain.invariants.page import assert_page
from dms.utils.audit import log_action
from dms.utils.transaction import transactional


# Status changes go through publish/unpublish so page hooks always run
ALLOWED_UPDATE_FIELDS = ("title", "slug", "seo")


def update_page(
    *,
    page_id: str,
    context: HookContext,
    data: Dict[str, Any],
) -> Page:
    """
    Update mutable fields on a page.

    Design rules:
    - Only whitelisted fields are mutable
    - No silent no-op updates
    - Invariants always revalidated
    """

    page = Page.query.filter_by(
        id=page_id,
        tenant_id=context.tenant_id,
        deleted_at=None,
    ).first()

    if not page:
        raise ValueError("Page not found")

    changed_fields: list[str] = []

    with transactional():
        for field in ALLOWED_UPDATE_FIELDS:
            if field in data and getattr(page, field) != data[field]:
                setattr(page, field, data[field])
                changed_fields.append(field)

        if not changed_fields:
            # Explicitly fail instead of silently succeeding
            raise ValueError("No valid fields provided for update")

        assert_page(page)

        log_action(
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            action="page.update",
            entity_type="page",
            entity_id=page.id,
            payload={
                "fields": changed_fields,
            },
        )

    return page
