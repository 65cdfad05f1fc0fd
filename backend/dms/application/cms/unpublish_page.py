# dms/application/cms/unpublish_page.py
from typing import Dict
from sqlalchemy import select
from dms.extensions import db
from dms.models.page import Page
from dms.models.page_version import PageVersion
from dms.plugins.context import HookContext
from dms.plugins.registry import get_page_extensions
from dms.utils.transaction import transactional
from dms.utils.versioning import snapshot_page, next_version
from dms.utils.audit import log_action
from dms.domain.invariants.page import assert_page
from dms.domain.lifecycle.page import Stage, assert_page_transition


def unpublish_page(
    *,
    page_id: str,
    context: HookContext,
) -> Dict[str, int]:
    """
    Removes a page from the live stage.

    The page may already be deleted from draft; in that case this removes
    its last remaining copy and the before-delete hooks clean up its
    documents.
    """

    # 1️⃣ Fetch the page with a row-level lock (draft-deleted pages included)
    page = (
        db.session.execute(
            select(Page)
            .where(Page.id == page_id, Page.tenant_id == context.tenant_id)
            .with_for_update()
        )
        .scalar_one_or_none()
    )

    if not page:
        raise ValueError("Page not found")

    with transactional():
        # 2️⃣ Lifecycle enforcement: only allow valid transitions
        assert_page_transition(from_status=page.status, to_status="draft")

        # 3️⃣ Deleting from live
        get_page_extensions().invoke(
            "on_before_delete", page, context.on_stage(Stage.LIVE)
        )

        # 4️⃣ Apply state change
        page.status = "draft"
        assert_page(page)

        # 5️⃣ Create an immutable PageVersion for the unpublish action
        version = PageVersion()
        version.page_id = page.id
        version.tenant_id = context.tenant_id
        version.version = next_version(page.id, context.tenant_id)
        version.status = "unpublished"
        version.snapshot = snapshot_page(page)
        version.created_by = context.actor_id

        db.session.add(version)
        db.session.flush()

        # 6️⃣ Audit logging
        log_action(
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            action="page.unpublish",
            entity_type="page",
            entity_id=page.id,
            payload={"version": version.version},
        )

    return {
        "page_id": page.id,
        "version": version.version,
    }
