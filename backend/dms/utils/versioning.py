def snapshot_page(page):
    return {
        "page": {
            "id": page.id,
            "title": page.title,
            "slug": page.slug,
            "seo": page.seo,
            "status": page.status,
        },
        "document_sets": [
            {
                "id": ds.id,
                "title": ds.title,
                "sort_order": ds.sort_order,
                "documents": [
                    {
                        "id": link.document_id,
                        "sort_order": link.sort_order,
                    }
                    for link in ds.links
                ],
            }
            for ds in page.document_sets
        ],
    }

def next_version(page_id, tenant_id):
    from dms.models.page_version import PageVersion

    last = (
        PageVersion.query
        .filter_by(page_id=page_id, tenant_id=tenant_id)
        .order_by(PageVersion.version.desc())
        .first()
    )
    return (last.version + 1) if last else 1
