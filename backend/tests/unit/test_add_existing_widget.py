import httpx
import pytest

from dms.widgets.add_existing import (
    AddExistingDocumentWidget,
    DocumentAddTransport,
    TRANSPORT_ERROR,
    WidgetState,
    parse_document_list,
)

DOCUMENT_LIST_HTML = """
<ul>
  <li><a href="#" class="add-document" data-document-id="doc-1">Local plan</a></li>
  <li><a href="#" class="add-document" data-document-id="doc-2">Flood map</a></li>
</ul>
"""


class RecordingHandler:
    def __init__(self, responder):
        self.responder = responder
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.responder(request)


def _linked(request):
    return httpx.Response(200, json={
        "id": request.url.params["documentID"],
        "name": "Local plan",
        "thumbnail_url": "/dms/icons/pdf-32.png",
        "buttons": "<button>Edit</button>",
        "edit_url": "/api/v1/documents/doc-1",
    })


def _widget(handler, **kwargs):
    client = httpx.Client(
        transport=httpx.MockTransport(handler),
        base_url="http://testserver/",
    )
    return AddExistingDocumentWidget("set-1", DocumentAddTransport(client), **kwargs)


def test_link_editor_mode_records_selection_without_request():
    handler = RecordingHandler(_linked)
    widget = _widget(handler, link_editor=True)

    widget.on_autocomplete_select("doc-1", "doc-1 - Local plan")

    assert handler.requests == []
    assert widget.pending_selection.document_id == "doc-1"
    assert widget.selection_node.attrs["data-document-id"] == "doc-1"
    assert widget.items == []
    assert widget.autocomplete_text == ""


def test_default_mode_links_document_once():
    handler = RecordingHandler(_linked)
    widget = _widget(handler)

    widget.on_autocomplete_select("doc-1")

    assert len(handler.requests) == 1
    request = handler.requests[0]
    assert request.url.path == "/admin/pages/adddocument/linkdocument"
    assert request.url.params["dsid"] == "set-1"
    assert request.url.params["documentID"] == "doc-1"

    assert widget.state == WidgetState.ATTACHED
    assert len(widget.items) == 1
    assert 'data-fileid="doc-1"' in widget.items[0].html


def test_second_attach_while_pending_is_ignored():
    nested = []

    def responder(request):
        nested.append(widget.add_document("doc-2"))
        return _linked(request)

    handler = RecordingHandler(responder)
    widget = _widget(handler)

    widget.add_document("doc-1")

    assert nested == [None]
    assert len(handler.requests) == 1
    assert len(widget.items) == 1


def test_error_response_renders_mapped_message():
    handler = RecordingHandler(lambda request: httpx.Response(200, json={"error": "document_not_found"}))
    widget = _widget(handler, error_messages={"document_not_found": "Document not found"})

    item = widget.add_document("doc-404")

    assert widget.state == WidgetState.ERROR
    assert item.result.error == "document_not_found"
    assert not item.retryable
    assert "Document not found" in item.html
    assert "ui-state-error" in item.node.classes


def test_transport_failure_offers_retry():
    attempts = []

    def responder(request):
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return _linked(request)

    widget = _widget(RecordingHandler(responder))

    failed = widget.add_document("doc-1")

    assert failed.retryable
    assert failed.result.error == TRANSPORT_ERROR
    assert widget.state == WidgetState.ERROR

    recovered = widget.retry()

    assert len(attempts) == 2
    assert recovered.result.error is None
    assert widget.items == [recovered]
    assert widget.state == WidgetState.ATTACHED


def test_server_error_status_is_a_transport_failure():
    widget = _widget(RecordingHandler(lambda request: httpx.Response(500)))

    item = widget.add_document("doc-1")

    assert item.result.error == TRANSPORT_ERROR


def test_non_json_response_does_not_block_later_attaches():
    responses = iter([
        lambda request: httpx.Response(200, text="<html>login</html>"),
        _linked,
    ])
    handler = RecordingHandler(lambda request: next(responses)(request))
    widget = _widget(handler)

    failed = widget.add_document("doc-1")

    assert failed.retryable
    assert failed.result.error == TRANSPORT_ERROR
    assert widget.state == WidgetState.ERROR

    attached = widget.add_document("doc-1")

    assert len(handler.requests) == 2
    assert attached.result.error is None
    assert widget.state == WidgetState.ATTACHED


def test_non_mapping_payload_is_retryable():
    attempts = []

    def responder(request):
        attempts.append(request)
        if len(attempts) == 1:
            return httpx.Response(200, json=["doc-1"])
        return _linked(request)

    widget = _widget(RecordingHandler(responder))

    failed = widget.add_document("doc-1")

    assert failed.result.error == TRANSPORT_ERROR
    assert widget.state == WidgetState.ERROR

    recovered = widget.retry()

    assert len(attempts) == 2
    assert recovered.result.error is None
    assert widget.items == [recovered]


def test_cancel_removes_failed_item():
    widget = _widget(RecordingHandler(lambda request: httpx.Response(200, json={"error": "boom"})))
    item = widget.add_document("doc-1")

    widget.cancel(item)

    assert widget.items == []
    assert widget.state == WidgetState.IDLE


def test_tree_panel_disables_autocomplete():
    widget = _widget(RecordingHandler(_linked))

    widget.open_tree_panel()
    assert widget.state == WidgetState.PICKING
    assert widget.autocomplete_disabled

    widget.close_tree_panel()
    assert widget.state == WidgetState.IDLE
    assert not widget.autocomplete_disabled


def test_closing_tree_panel_keeps_autocomplete_disabled_while_results_show():
    handler = RecordingHandler(lambda request: httpx.Response(200, text=DOCUMENT_LIST_HTML))
    widget = _widget(handler)

    widget.open_tree_panel()
    entries = widget.choose_page("page-1")
    widget.close_tree_panel()

    assert [e.document_id for e in entries] == ["doc-1", "doc-2"]
    assert handler.requests[0].url.params["pageID"] == "page-1"
    assert widget.state == WidgetState.RESULT_LIST
    assert widget.autocomplete_disabled

    widget.click_outside()

    assert not widget.result_list_visible
    assert not widget.autocomplete_disabled
    assert widget.state == WidgetState.IDLE


def test_clicking_a_listed_document_attaches_and_hides_list():
    def responder(request):
        if request.url.path.endswith("documentlist"):
            return httpx.Response(200, text=DOCUMENT_LIST_HTML)
        return _linked(request)

    handler = RecordingHandler(responder)
    widget = _widget(handler)

    widget.choose_page("page-1")
    widget.click_document("doc-2")

    assert handler.requests[-1].url.params["documentID"] == "doc-2"
    assert not widget.result_list_visible
    assert widget.state == WidgetState.ATTACHED


def test_failed_document_list_sets_error():
    widget = _widget(RecordingHandler(lambda request: httpx.Response(503)))

    assert widget.choose_page("page-1") == []
    assert widget.document_list_error == TRANSPORT_ERROR
    assert widget.document_list_html == ""


def test_autocomplete_failure_returns_no_suggestions():
    widget = _widget(RecordingHandler(lambda request: httpx.Response(500)))

    assert widget.autocomplete("plan") == []


@pytest.mark.parametrize(
    "html, expected",
    [
        (DOCUMENT_LIST_HTML, [("doc-1", "Local plan"), ("doc-2", "Flood map")]),
        ("<p>There are no documents attached to the selected page.</p>", []),
        ('<a class="other" data-document-id="x">Other</a>', []),
    ],
)
def test_parse_document_list(html, expected):
    assert [(e.document_id, e.title) for e in parse_document_list(html)] == expected
