from markupsafe import Markup

from dms.widgets.markup import (
    LinkResult,
    el,
    error_text,
    render_document_item,
    render_selected_document,
)


def test_success_item_shows_added_status_and_edit_frame():
    result = LinkResult(
        id="doc-1",
        name="Annual report",
        thumbnail_url="/dms/icons/pdf-32.png",
        buttons='<button class="edit">Edit</button>',
        edit_url="/api/v1/documents/doc-1",
    )

    item = render_document_item(result)
    html = str(item.render())

    assert item.tag == "li"
    assert "ui-state-error" not in item.classes
    assert 'data-fileid="doc-1"' in html
    assert item.find_all("ss-uploadfield-item-status")[0].text() == "Added to Document Set"
    assert '<button class="edit">Edit</button>' in html

    iframe = item.find_all("ss-uploadfield-item-editform")[0].children[0]
    assert iframe.attrs["src"] == "/api/v1/documents/doc-1"


def test_error_item_uses_mapped_message():
    item = render_document_item(
        LinkResult.failed("document_not_found", "doc-9"),
        error_messages={"document_not_found": "That document no longer exists"},
    )

    assert "ui-state-error" in item.classes
    status = item.find_all("ss-uploadfield-item-status")[0]
    assert status.text() == "That document no longer exists"
    assert item.find_all("ss-uploadfield-item-cancelfailed")
    assert not item.find_all("ss-uploadfield-item-editform")
    assert not item.find_all("ss-uploadfield-item-retry")


def test_unmapped_error_code_is_shown_verbatim():
    assert error_text("weird_failure", {"other": "Other"}) == "weird_failure"
    assert error_text("weird_failure") == "weird_failure"


def test_retryable_error_item_offers_retry():
    item = render_document_item(LinkResult.failed("transport_error", "doc-2"), retryable=True)

    retry = item.find_all("ss-uploadfield-item-retry")
    assert retry
    assert retry[0].text() == "Retry"


def test_document_name_is_escaped():
    result = LinkResult(id="doc-3", name='<script>alert("x")</script>')

    html = str(render_document_item(result).render())

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_server_buttons_are_trusted_markup():
    result = LinkResult(id="doc-4", name="Plan", buttons="<b>Edit</b>")

    actions = render_document_item(result).find_all("ss-uploadfield-item-actions")[0]

    assert isinstance(actions.children[0], Markup)
    assert "<b>Edit</b>" in str(actions.render())


def test_custom_messages_override_defaults():
    item = render_document_item(LinkResult(id="d", name="D"), messages={"added": "Attached"})

    assert item.find_all("ss-uploadfield-item-status")[0].text() == "Attached"


def test_from_payload_treats_empty_error_as_success():
    result = LinkResult.from_payload({"id": "doc-5", "name": "Map", "error": ""})

    assert result.error is None
    assert result.name == "Map"


def test_selected_document_node():
    node = render_selected_document("doc-6", "Flood <map>")

    assert node.attrs["data-document-id"] == "doc-6"
    assert str(node.render()) == '<div class="selected-document" data-document-id="doc-6">Flood &lt;map&gt;</div>'


def test_void_elements_have_no_closing_tag():
    assert str(el("img", {"src": "a.png", "alt": ""}).render()) == '<img src="a.png" alt="">'
