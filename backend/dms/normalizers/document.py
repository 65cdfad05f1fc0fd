def normalize_document(document, admin=False):
    data = {
        "id": document.id,
        "title": document.title,
        "filename": document.filename,
        "extension": document.extension,
        "thumbnail_url": document.thumbnail_url,
    }

    if admin:
        data["embargoed_until_published"] = bool(document.embargoed_until_published)
        data["created_at"] = document.created_at.isoformat() if document.created_at else None
        data["updated_at"] = document.updated_at.isoformat() if document.updated_at else None

    return data
