# dms/widgets/markup.py
"""
Node tree for the widget's list items.

Text and attribute values are escaped on render; only values wrapped in
``markupsafe.Markup`` pass through untouched.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from markupsafe import Markup, escape

VOID_TAGS = {"img", "input", "br", "hr"}

DEFAULT_MESSAGES = {
    "added": "Added to Document Set",
    "cancel": "Cancel",
    "retry": "Retry",
}

Child = Union["Element", str, Markup]


@dataclass
class Element:
    tag: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    children: List[Child] = field(default_factory=list)

    def find_all(self, css_class: str) -> List["Element"]:
        found = []
        if css_class in self.classes:
            found.append(self)
        for child in self.children:
            if isinstance(child, Element):
                found.extend(child.find_all(css_class))
        return found

    @property
    def classes(self) -> List[str]:
        return str(self.attrs.get("class", "")).split()

    def text(self) -> str:
        parts = []
        for child in self.children:
            if isinstance(child, Element):
                parts.append(child.text())
            elif not isinstance(child, Markup):
                parts.append(str(child))
        return "".join(parts)

    def render(self) -> Markup:
        attrs = []
        for name, value in self.attrs.items():
            if value is None or value is False:
                continue
            if value is True:
                attrs.append(f" {name}")
            else:
                attrs.append(f' {name}="{escape(value)}"')

        opening = f"<{self.tag}{''.join(attrs)}>"
        if self.tag in VOID_TAGS:
            return Markup(opening)

        inner = "".join(
            str(child.render()) if isinstance(child, Element) else str(escape(child))
            for child in self.children
        )
        return Markup(f"{opening}{inner}</{self.tag}>")

    def __html__(self) -> str:
        return str(self.render())


def el(tag: str, attrs: Optional[Mapping[str, Any]] = None, *children: Child) -> Element:
    return Element(tag, dict(attrs or {}), list(children))


@dataclass(frozen=True)
class LinkResult:
    """Response of the linkdocument endpoint."""

    id: Optional[str] = None
    name: str = ""
    thumbnail_url: str = ""
    buttons: str = ""
    edit_url: str = ""
    error: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "LinkResult":
        return cls(
            id=payload.get("id"),
            name=payload.get("name") or "",
            thumbnail_url=payload.get("thumbnail_url") or "",
            buttons=payload.get("buttons") or "",
            edit_url=payload.get("edit_url") or "",
            error=payload.get("error") or None,
        )

    @classmethod
    def failed(cls, code: str, document_id: Optional[str] = None) -> "LinkResult":
        return cls(id=document_id, name=document_id or "", error=code)


def error_text(code: str, error_messages: Optional[Mapping[str, str]] = None) -> str:
    return (error_messages or {}).get(code) or code


def render_document_item(
    result: LinkResult,
    messages: Optional[Mapping[str, str]] = None,
    error_messages: Optional[Mapping[str, str]] = None,
    retryable: bool = False,
) -> Element:
    """
    The ``<li>`` shown in the widget's file list after an attach attempt.

    Success: status "added", the server's action buttons and an edit frame.
    Error: mapped error text and a cancel action (plus retry if requested).
    """
    messages = {**DEFAULT_MESSAGES, **(messages or {})}

    item_classes = "ss-uploadfield-item template-download"
    if result.error:
        item_classes += " ui-state-error"

    if result.error:
        status_text = error_text(result.error, error_messages)
        status = el("div", {
            "class": "ss-uploadfield-item-status ui-state-error-text",
            "title": status_text,
        }, status_text)
    else:
        status = el("div", {
            "class": "ss-uploadfield-item-status ui-state-success-text",
            "title": messages["added"],
        }, messages["added"])

    info = el(
        "div", {"class": "ss-uploadfield-item-info"},
        el(
            "label", {"class": "ss-uploadfield-item-name"},
            el("span", {"class": "name", "title": result.name}, result.name),
            status,
            el("div", {"class": "clear"}),
        ),
    )

    if result.error:
        actions = [
            el("div", {"class": "ss-uploadfield-item-cancel ss-uploadfield-item-cancelfailed"},
               el("button", {"class": "icon icon-16", "type": "button"}, messages["cancel"])),
        ]
        if retryable:
            actions.append(
                el("div", {"class": "ss-uploadfield-item-retry"},
                   el("button", {"class": "icon icon-16", "type": "button"}, messages["retry"]))
            )
        info.children.append(el("div", {"class": "ss-uploadfield-item-actions"}, *actions))
    else:
        # Buttons are markup generated by the CMS itself
        info.children.append(
            el("div", {"class": "ss-uploadfield-item-actions"}, Markup(result.buttons))
        )

    item = el(
        "li", {"class": item_classes, "data-fileid": result.id},
        el("div", {"class": "ss-uploadfield-item-preview"},
           el("span", None, el("img", {"src": result.thumbnail_url, "alt": ""}))),
        info,
    )

    if not result.error:
        item.children.append(
            el("div", {"class": "ss-uploadfield-item-editform loading"},
               el("iframe", {"frameborder": "0", "src": result.edit_url, "style": "width: 60%;"}))
        )

    return item


def render_selected_document(document_id: str, name: Optional[str] = None) -> Element:
    return el(
        "div",
        {"class": "selected-document", "data-document-id": document_id},
        name if name is not None else document_id,
    )
