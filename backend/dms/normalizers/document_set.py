from .document import normalize_document

def normalize_document_set(document_set, admin=False, include_documents=False):
    data = {
        "id": document_set.id,
        "title": document_set.title,
        "page_id": document_set.page_id,
        "sort_order": document_set.sort_order,
        "document_count": len(document_set.links),
    }

    if include_documents:
        documents = document_set.documents
        if not admin:
            # Embargoed documents stay hidden until their page is published
            documents = [d for d in documents if not d.embargoed_until_published]
        data["documents"] = [normalize_document(d, admin=admin) for d in documents]

    return data
