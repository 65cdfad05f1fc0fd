# dms/widgets/add_existing.py
"""
"Add existing document" widget.

One instance per rendered widget root on the document set edit form. The
operator finds a document by autocomplete or by picking a page in the
page tree; the widget either attaches it to the edited document set
(default) or just records the selection for the surrounding form
(link-editor mode).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

import httpx
from bs4 import BeautifulSoup

from .markup import (
    Element,
    LinkResult,
    render_document_item,
    render_selected_document,
)

logger = logging.getLogger(__name__)

LINK_DOCUMENT_PATH = "admin/pages/adddocument/linkdocument"
AUTOCOMPLETE_PATH = "admin/pages/adddocument/documentautocomplete"
DOCUMENT_LIST_PATH = "admin/pages/adddocument/documentlist"

TRANSPORT_ERROR = "transport_error"
LOADING_HTML = "<p>Loading...</p>"


class WidgetState(str, Enum):
    IDLE = "idle"
    PICKING = "picking"
    RESULT_LIST = "result_list"
    ATTACHING = "attaching"
    ATTACHED = "attached"
    ERROR = "error"


class DocumentAddTransport:
    """Calls the CMS add-document endpoints over an ``httpx.Client``."""

    def __init__(self, client: httpx.Client):
        self.client = client

    def link_document(self, document_set_id: str, document_id: str) -> Dict[str, Any]:
        response = self.client.get(
            LINK_DOCUMENT_PATH,
            params={"dsid": document_set_id, "documentID": document_id},
        )
        response.raise_for_status()
        return response.json()

    def autocomplete(self, term: str) -> List[Dict[str, Any]]:
        response = self.client.get(AUTOCOMPLETE_PATH, params={"term": term})
        response.raise_for_status()
        return response.json()

    def document_list(self, page_id: str) -> str:
        response = self.client.get(DOCUMENT_LIST_PATH, params={"pageID": page_id})
        response.raise_for_status()
        return response.text


@dataclass(frozen=True)
class DocumentListEntry:
    document_id: str
    title: str


@dataclass
class RenderedItem:
    result: LinkResult
    node: Element
    retryable: bool = False

    @property
    def html(self) -> str:
        return str(self.node.render())


def parse_document_list(html: str) -> List[DocumentListEntry]:
    soup = BeautifulSoup(html, "html.parser")
    return [
        DocumentListEntry(
            document_id=str(anchor["data-document-id"]),
            title=anchor.get_text(strip=True),
        )
        for anchor in soup.select("a.add-document[data-document-id]")
    ]


class AddExistingDocumentWidget:
    def __init__(
        self,
        document_set_id: str,
        transport: DocumentAddTransport,
        link_editor: bool = False,
        error_messages: Optional[Mapping[str, str]] = None,
        messages: Optional[Mapping[str, str]] = None,
    ):
        self.document_set_id = document_set_id
        self.transport = transport
        self.link_editor = link_editor
        self.error_messages = dict(error_messages or {})
        self.messages = dict(messages or {})

        self.state = WidgetState.IDLE
        self.autocomplete_text = ""
        self.autocomplete_disabled = False
        self.tree_panel_open = False

        self.result_list_visible = False
        self.document_list_html = ""
        self.document_list: List[DocumentListEntry] = []
        self.document_list_error: Optional[str] = None

        self.items: List[RenderedItem] = []
        self.pending_selection: Optional[DocumentListEntry] = None
        self._last_attach: Optional[str] = None

    # ------------------------
    # Autocomplete
    # ------------------------
    def autocomplete(self, term: str) -> List[Dict[str, Any]]:
        self.autocomplete_text = term
        try:
            return self.transport.autocomplete(term)
        except httpx.HTTPError as exc:
            logger.warning("Document autocomplete failed: %s", exc)
            return []

    def on_autocomplete_select(self, value: str, label: Optional[str] = None) -> None:
        if self.link_editor:
            self.select_document(value, label)
        else:
            self.add_document(value)

        self.autocomplete_text = ""

    # ------------------------
    # Page tree picker
    # ------------------------
    def open_tree_panel(self) -> None:
        self.tree_panel_open = True
        self.autocomplete_disabled = True
        self.result_list_visible = False
        self.state = WidgetState.PICKING

    def close_tree_panel(self) -> None:
        self.tree_panel_open = False
        self.autocomplete_disabled = self.result_list_visible
        if self.state == WidgetState.PICKING:
            self.state = WidgetState.IDLE

    def choose_page(self, page_id: str) -> List[DocumentListEntry]:
        self.document_list_html = LOADING_HTML
        self.document_list = []
        self.document_list_error = None
        self.result_list_visible = True
        self.state = WidgetState.RESULT_LIST

        try:
            html = self.transport.document_list(page_id)
        except httpx.HTTPError as exc:
            logger.warning("Loading documents of page %s failed: %s", page_id, exc)
            self.document_list_error = TRANSPORT_ERROR
            self.document_list_html = ""
            return []

        self.document_list_html = html
        self.document_list = parse_document_list(html)
        return self.document_list

    def click_document(self, document_id: str, text: Optional[str] = None) -> None:
        if self.link_editor:
            self.select_document(document_id, text)
        else:
            self.add_document(document_id)

        self.hide_result_list()

    def click_outside(self) -> None:
        if self.result_list_visible:
            self.hide_result_list()

    def hide_result_list(self) -> None:
        self.result_list_visible = False
        self.autocomplete_disabled = False
        if self.state == WidgetState.RESULT_LIST:
            self.state = WidgetState.IDLE

    # ------------------------
    # Selection / attach
    # ------------------------
    def select_document(self, document_id: Optional[str], name: Optional[str] = None) -> None:
        """Link-editor mode: remember the choice, no request is made."""
        if document_id is None:
            self.pending_selection = None
            return

        self.pending_selection = DocumentListEntry(
            document_id=str(document_id),
            title=name if name is not None else str(document_id),
        )

    @property
    def selection_node(self) -> Optional[Element]:
        if self.pending_selection is None:
            return None
        return render_selected_document(
            self.pending_selection.document_id, self.pending_selection.title
        )

    def add_document(self, document_id: str) -> Optional[RenderedItem]:
        # One attach at a time; repeated clicks while waiting are dropped
        if self.state == WidgetState.ATTACHING:
            logger.debug("Ignoring attach of %s while a request is pending", document_id)
            return None

        self.state = WidgetState.ATTACHING
        self._last_attach = document_id

        try:
            payload = self.transport.link_document(self.document_set_id, document_id)
        except (httpx.HTTPError, ValueError) as exc:
            # ValueError covers a body that is not JSON, e.g. an expired-session page
            logger.warning("Attaching document %s failed: %s", document_id, exc)
            return self._push(LinkResult.failed(TRANSPORT_ERROR, document_id), retryable=True)

        if not isinstance(payload, Mapping):
            logger.warning("Unexpected linkdocument response for %s: %r", document_id, payload)
            return self._push(LinkResult.failed(TRANSPORT_ERROR, document_id), retryable=True)

        return self._push(LinkResult.from_payload(payload))

    def retry(self) -> Optional[RenderedItem]:
        if self._last_attach is None or self.state == WidgetState.ATTACHING:
            return None

        failed = [item for item in self.items if item.retryable]
        for item in failed:
            self.items.remove(item)
        return self.add_document(self._last_attach)

    def cancel(self, item: RenderedItem) -> None:
        if item in self.items:
            self.items.remove(item)
        if self.state == WidgetState.ERROR and not any(i.result.error for i in self.items):
            self.state = WidgetState.IDLE

    def _push(self, result: LinkResult, retryable: bool = False) -> RenderedItem:
        node = render_document_item(
            result,
            messages=self.messages,
            error_messages=self.error_messages,
            retryable=retryable,
        )
        item = RenderedItem(result=result, node=node, retryable=retryable)
        self.items.append(item)
        self.state = WidgetState.ERROR if result.error else WidgetState.ATTACHED
        return item
