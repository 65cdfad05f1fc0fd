# dms/application/cms/publish_page.py
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


def publish_page(
    *,
    page_id: str,
    context: HookContext,
) -> Dict[str, int]:
    """
    Publishes a page and creates an immutable version snapshot.

    Responsibilities:
    - transactional boundary
    - lifecycle transition enforcement
    - before-publish page hooks (embargo release)
    - version creation
    - audit logging
    """

    # 1️⃣ Fetch page with row-level lock
    page = (
        db.session.execute(
            select(Page)
            .where(
                Page.id == page_id,
                Page.tenant_id == context.tenant_id,
                Page.deleted_at.is_(None),
            )
            .with_for_update()
        )
        .scalar_one_or_none()
    )

    if not page:
        raise ValueError("Page not found")

    with transactional():
        # 2️⃣ Lifecycle transition enforcement
        assert_page_transition(from_status=page.status, to_status="published")

        # 3️⃣ Page hooks run before the transition commits
        get_page_extensions().invoke(
            "on_before_publish", page, context.on_stage(Stage.LIVE)
        )

        # 4️⃣ Apply state change
        page.status = "published"
        assert_page(page, publish=True)

        # 5️⃣ Create immutable PageVersion
        version = PageVersion()
        version.page_id = page.id
        version.tenant_id = context.tenant_id
        version.version = next_version(page.id, context.tenant_id)
        version.status = "published"
        version.snapshot = snapshot_page(page)
        version.created_by = context.actor_id

        db.session.add(version)
        db.session.flush()

        # 6️⃣ Audit logging
        log_action(
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            action="page.publish",
            entity_type="page",
            entity_id=page.id,
            payload={"version": version.version},
        )

    return {
        "page_id": page.id,
        "version": version.version,
    }
