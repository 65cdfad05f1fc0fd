# dms/plugins/document_sets.py
"""
Document sets page extension.

Adds the "Document Sets" tab to the page edit screen and keeps documents
consistent with the page lifecycle:

- before delete: documents only this page exposes are destroyed, unless
  the page still exists on the other stage
- before publish: embargoed documents on the page are released
"""
from __future__ import annotations

from typing import List

from flask import current_app

from dms.admin.fields import (
    AddExistingAutocompleter,
    FieldList,
    GridField,
    RelationEditorConfig,
)
from dms.application.documents.delete_document import destroy_document
from dms.domain.lifecycle.page import Stage
from dms.extensions import db
from dms.models.document import Document
from dms.models.document_set import DocumentSet
from dms.models.page import Page
from dms.normalizers.document_set import normalize_document_set
from dms.utils.audit import log_action
from dms.utils.permissions import DOCUMENT_ADMIN_PERMISSIONS, has_permission

from .context import HookContext

DOCUMENT_SETS_TAB = "Root.DocumentSets"
DOCUMENT_SETS_FIELD = "DocumentSets"


def get_document_sets(page: Page) -> List[DocumentSet]:
    return list(page.document_sets)


def get_all_documents(page: Page) -> List[Document]:
    """Documents across all of the page's sets, first occurrence wins."""
    seen = set()
    documents: List[Document] = []

    for document_set in get_document_sets(page):
        for document in document_set.documents:
            if document.id in seen:
                continue
            seen.add(document.id)
            documents.append(document)

    return documents


def get_title_with_number_of_documents(page: Page) -> str:
    return f"{page.title} ({len(get_all_documents(page))})"


def unassigned_document_sets(tenant_id: str):
    return DocumentSet.for_tenant(tenant_id).filter(
        DocumentSet.page_id.is_(None),
    ).order_by(DocumentSet.title.asc())


class DocumentSetsExtension:
    def get_document_sets(self, page: Page) -> List[DocumentSet]:
        return get_document_sets(page)

    def get_all_documents(self, page: Page) -> List[Document]:
        return get_all_documents(page)

    def get_title_with_number_of_documents(self, page: Page) -> str:
        return get_title_with_number_of_documents(page)

    # ------------------------
    # Edit screen
    # ------------------------
    def update_cms_fields(self, page: Page, fields: FieldList, context: HookContext) -> None:
        if not context.documents_enabled:
            return

        # No tab at all for users who cannot manage documents
        if not has_permission(context.current_user, DOCUMENT_ADMIN_PERMISSIONS):
            return

        config = RelationEditorConfig()
        grid = GridField(
            DOCUMENT_SETS_FIELD,
            title=None,
            items=get_document_sets(page),
            config=config,
            normalize=normalize_document_set,
        )
        grid.add_extra_class("documentsets")

        # Only sets not yet assigned to any page can be added
        config.get_component_by_type(AddExistingAutocompleter).set_search_list(
            unassigned_document_sets(page.tenant_id)
        )

        fields.add_field_to_tab(DOCUMENT_SETS_TAB, grid)
        fields.find_or_make_tab(DOCUMENT_SETS_TAB).title = (
            f"Document Sets ({len(grid.items)})"
        )

    # ------------------------
    # Lifecycle hooks
    # ------------------------
    def on_before_delete(self, page: Page, context: HookContext) -> None:
        if context.current_stage == Stage.LIVE:
            exists_on_other_stage = not page.is_deleted_from_stage
        else:
            exists_on_other_stage = page.exists_on_live

        if exists_on_other_stage:
            current_app.logger.info(
                "Page %s still exists on another stage; keeping its documents",
                page.id,
            )
            return

        destroyed = 0
        for document in get_all_documents(page):
            # Shared with another page: leave it alone
            if document.related_pages_count() > 1:
                continue

            if destroy_document(
                document,
                tenant_id=context.tenant_id,
                actor_id=context.actor_id,
                reason="page.delete",
            ):
                destroyed += 1

        if destroyed:
            current_app.logger.info(
                "Deleted %d orphaned document(s) with page %s", destroyed, page.id
            )

    def on_before_publish(self, page: Page, context: HookContext) -> None:
        embargoed = [d for d in get_all_documents(page) if d.embargoed_until_published]

        for document in embargoed:
            document.embargoed_until_published = False
            db.session.add(document)

            log_action(
                tenant_id=context.tenant_id,
                actor_id=context.actor_id,
                action="document.embargo_release",
                entity_type="document",
                entity_id=document.id,
                payload={"page_id": page.id},
            )

        if embargoed:
            current_app.logger.info(
                "Released embargo on %d document(s) for page %s", len(embargoed), page.id
            )
