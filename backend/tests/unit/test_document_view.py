from dms.plugins.document_sets import (
    DocumentSetsExtension,
    get_all_documents,
    get_document_sets,
    get_title_with_number_of_documents,
)


def test_all_documents_removes_duplicates_in_first_seen_order(make_page, make_document, make_set):
    page = make_page("Planning")
    d1 = make_document("Local plan")
    d2 = make_document("Transport study")
    d3 = make_document("Flood map")
    make_set("Core", page=page, documents=[d1, d2])
    make_set("Evidence", page=page, documents=[d2, d3])

    assert [d.id for d in get_all_documents(page)] == [d1.id, d2.id, d3.id]


def test_all_documents_of_page_without_sets_is_empty(make_page):
    page = make_page("Empty")

    assert get_all_documents(page) == []
    assert get_document_sets(page) == []


def test_document_sets_follow_sort_order(make_page, make_set):
    page = make_page("Council")
    first = make_set("Minutes", page=page)
    second = make_set("Agendas", page=page)
    make_set("Unassigned")

    assert [s.id for s in get_document_sets(page)] == [first.id, second.id]


def test_title_with_number_of_documents_counts_unique_documents(make_page, make_document, make_set):
    page = make_page("About us")
    shared = make_document("Annual report")
    make_set("Reports", page=page, documents=[shared, make_document("Accounts")])
    make_set("Highlights", page=page, documents=[shared])

    assert get_title_with_number_of_documents(page) == "About us (2)"


def test_extension_exposes_the_same_views(make_page, make_document, make_set):
    page = make_page("Services")
    document = make_document("Fees")
    make_set("Charges", page=page, documents=[document])
    extension = DocumentSetsExtension()

    assert extension.get_all_documents(page) == [document]
    assert extension.get_title_with_number_of_documents(page) == "Services (1)"
    assert len(extension.get_document_sets(page)) == 1
