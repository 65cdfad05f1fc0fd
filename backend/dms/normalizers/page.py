from .document_set import normalize_document_set

def normalize_page(page, admin=False):
    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "status": page.status if admin else None,
        "seo": page.seo or {},
        "document_sets": [
            normalize_document_set(ds, admin=admin, include_documents=True)
            for ds in page.document_sets
        ],
    }

    if admin:
        data["exists_on_live"] = page.exists_on_live
        data["deleted_at"] = page.deleted_at.isoformat() if page.deleted_at else None

    return data
