from .exceptions import InvariantViolation

def assert_document_set_assignable(document_set, page):
    """
    A document set belongs to at most one page. Only unassigned sets
    (or sets already owned by this page) may be attached.
    """
    if document_set.tenant_id != page.tenant_id:
        raise InvariantViolation("Document set belongs to another tenant.")

    if document_set.page_id is not None and document_set.page_id != page.id:
        raise InvariantViolation("Document set is already assigned to a page.")

def assert_document_linkable(document_set, document):
    if document_set.tenant_id != document.tenant_id:
        raise InvariantViolation("Document belongs to another tenant.")
