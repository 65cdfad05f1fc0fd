import io
import os

from dms.extensions import db
from dms.models import Document, DocumentSetDocument


def _fresh(model, object_id):
    db.session.expire_all()
    return db.session.get(model, object_id)


def test_upload_document(app, client, document_admin, auth_headers):
    response = client.post(
        "/api/v1/documents",
        data={
            "file": (io.BytesIO(b"%PDF-1.4 minutes"), "minutes.pdf"),
            "embargoed_until_published": "true",
        },
        content_type="multipart/form-data",
        headers=auth_headers(document_admin),
    )

    assert response.status_code == 201
    document = _fresh(Document, response.get_json()["id"])
    assert document.title == "minutes.pdf"
    assert document.extension == "pdf"
    assert document.embargoed_until_published is True
    assert os.path.exists(document.file_url)
    assert document.file_url.startswith(app.config["UPLOAD_FOLDER"])


def test_upload_rejects_unknown_file_type(client, document_admin, auth_headers):
    response = client.post(
        "/api/v1/documents",
        data={"file": (io.BytesIO(b"MZ"), "setup.exe")},
        content_type="multipart/form-data",
        headers=auth_headers(document_admin),
    )

    assert response.status_code == 400
    assert Document.query.count() == 0


def test_upload_needs_documents_feature(client, tenant, admin_user, auth_headers):
    tenant.enable_documents = False
    db.session.commit()

    response = client.post(
        "/api/v1/documents",
        data={"title": "Anything"},
        content_type="multipart/form-data",
        headers=auth_headers(admin_user),
    )

    assert response.status_code == 403


def test_documents_require_document_admin(client, editor, auth_headers, make_document):
    document = make_document("Private")

    response = client.get(f"/api/v1/documents/{document.id}", headers=auth_headers(editor))

    assert response.status_code == 403


def test_get_document_lists_sets_and_related_pages(client, admin_user, auth_headers, make_page, make_document, make_set):
    document = make_document("Local plan")
    page = make_page("Planning")
    document_set = make_set("Plans", page=page, documents=[document])

    response = client.get(f"/api/v1/documents/{document.id}", headers=auth_headers(admin_user))

    data = response.get_json()
    assert response.status_code == 200
    assert [s["id"] for s in data["document_sets"]] == [document_set.id]
    assert data["related_pages"] == [{"id": page.id, "title": "Planning"}]


def test_update_document_with_stale_header_conflicts(client, admin_user, auth_headers, make_document):
    document = make_document("Fees")

    response = client.put(
        f"/api/v1/documents/{document.id}",
        json={"title": "Fees 2026"},
        headers={
            **auth_headers(admin_user),
            "If-Unmodified-Since": "Thu, 01 Jan 2015 00:00:00 GMT",
        },
    )

    assert response.status_code == 409
    assert response.get_json()["error"] == "Conflict"
    assert _fresh(Document, document.id).title == "Fees"


def test_update_document_title(client, admin_user, auth_headers, make_document):
    document = make_document("Fees")

    response = client.put(
        f"/api/v1/documents/{document.id}",
        json={"title": "Fees 2026"},
        headers=auth_headers(admin_user),
    )

    assert response.status_code == 200
    assert _fresh(Document, document.id).title == "Fees 2026"


def test_delete_document_removes_links(client, admin_user, auth_headers, make_document, make_set):
    document = make_document("Old map")
    make_set("Maps", documents=[document])

    response = client.delete(f"/api/v1/documents/{document.id}", headers=auth_headers(admin_user))

    assert response.status_code == 200
    assert _fresh(Document, document.id) is None
    assert DocumentSetDocument.query.filter_by(document_id=document.id).count() == 0


def test_link_document_to_set(client, admin_user, auth_headers, make_document, make_set):
    first = make_document("First")
    second = make_document("Second")
    document_set = make_set("Bundle", documents=[first])
    headers = auth_headers(admin_user)

    response = client.post(
        f"/api/v1/document-sets/{document_set.id}/documents",
        json={"document_id": second.id},
        headers=headers,
    )
    again = client.post(
        f"/api/v1/document-sets/{document_set.id}/documents",
        json={"document_id": second.id},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.get_json()["sort_order"] == 2
    assert again.get_json()["sort_order"] == 2
    assert DocumentSetDocument.query.filter_by(document_set_id=document_set.id).count() == 2


def test_link_unknown_document_is_not_found(client, admin_user, auth_headers, make_set):
    document_set = make_set("Bundle")

    response = client.post(
        f"/api/v1/document-sets/{document_set.id}/documents",
        json={"document_id": "missing"},
        headers=auth_headers(admin_user),
    )

    assert response.status_code == 404
    assert response.get_json()["code"] == "document_not_found"


def test_embargoed_documents_hidden_from_public_page(client, admin_user, auth_headers, make_page, make_document, make_set):
    page = make_page("Press", status="published")
    visible = make_document("Public statement")
    make_set("Statements", page=page, documents=[visible, make_document("Embargoed", embargoed=True)])

    data = client.get("/api/v1/pages/press", headers=auth_headers(admin_user)).get_json()

    assert [d["id"] for d in data["document_sets"][0]["documents"]] == [visible.id]
    assert data["status"] is None
