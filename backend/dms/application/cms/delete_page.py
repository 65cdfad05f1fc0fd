from dms.models.page import Page
from dms.plugins.context import HookContext
from dms.plugins.registry import get_page_extensions
from dms.domain.lifecycle.page import Stage
from dms.utils.audit import log_action
from dms.utils.transaction import transactional


def delete_page(
    *,
    page_id: str,
    context: HookContext,
) -> None:
    """
    Delete a page from the draft stage (soft delete).

    Notes:
    - A published page stays live until it is unpublished
    - Before-delete hooks run first, inside the same transaction
    """

    page = Page.query.filter_by(
        id=page_id,
        tenant_id=context.tenant_id,
        deleted_at=None,
    ).first()

    if not page:
        raise ValueError("Page not found")

    with transactional():
        get_page_extensions().invoke(
            "on_before_delete", page, context.on_stage(Stage.DRAFT)
        )

        page.soft_delete()

        log_action(
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            action="page.delete",
            entity_type="page",
            entity_id=page_id,
            payload={
                "still_live": page.exists_on_live,
            },
        )
