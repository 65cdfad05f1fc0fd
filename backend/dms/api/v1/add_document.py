# dms/api/v1/add_document.py
"""
AJAX endpoints behind the "add existing document" widget.

Mounted at /admin/pages/adddocument. ``linkdocument`` reports failures as
``{"error": <code>}`` with a 200 status so the widget can render them
inline next to the item.
"""
from flask import Blueprint, current_app, g, jsonify, render_template, request, url_for
from flask_jwt_extended import jwt_required
from sqlalchemy import or_
from dms.application.document_sets.link_document import link_document
from dms.models.document import Document
from dms.models.page import Page
from dms.plugins.context import context_from_request
from dms.plugins.document_sets import get_all_documents
from dms.utils.decorators import tenant_required, permission_required
from dms.utils.permissions import DOCUMENT_ADMIN_PERMISSIONS

add_document_bp = Blueprint("add_document", __name__)


def thumbnail_for(document) -> str:
    if document.thumbnail_url:
        return document.thumbnail_url
    return f"/dms/icons/{document.extension or 'generic'}-32.png"


@add_document_bp.route("/linkdocument", methods=["GET"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def linkdocument():
    document_set_id = request.args.get("dsid")
    document_id = request.args.get("documentID")

    if not document_set_id or not document_id:
        return jsonify({"error": "missing_parameters"})

    try:
        link = link_document(
            document_set_id=document_set_id,
            document_id=document_id,
            context=context_from_request(),
        )
    except LookupError as exc:
        current_app.logger.info(
            "Could not link document %s to set %s: %s", document_id, document_set_id, exc
        )
        return jsonify({"error": exc.code})

    document = link.document
    return jsonify({
        "id": document.id,
        "name": document.title,
        "thumbnail_url": thumbnail_for(document),
        "buttons": render_template("add_document/buttons.html", document=document),
        "edit_url": url_for("v1.get_document", document_id=document.id),
        "showeditform": True,
    })


@add_document_bp.route("/documentautocomplete", methods=["GET"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def documentautocomplete():
    term = (request.args.get("term") or "").strip()
    limit = current_app.config.get("AUTOCOMPLETE_LIMIT", 20)

    query = Document.for_tenant(g.current_tenant.id)
    if term:
        query = query.filter(
            or_(
                Document.title.ilike(f"%{term}%"),
                Document.filename.ilike(f"%{term}%"),
                Document.id == term,
            )
        )

    documents = query.order_by(Document.title.asc()).limit(limit).all()

    return jsonify([
        {"value": d.id, "label": f"{d.id} - {d.title}"}
        for d in documents
    ])


@add_document_bp.route("/documentlist", methods=["GET"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def documentlist():
    page_id = request.args.get("pageID")

    page = None
    if page_id:
        page = Page.for_tenant(g.current_tenant.id).filter_by(
            id=page_id,
            deleted_at=None,
        ).first()

    documents = get_all_documents(page) if page else []

    return render_template("add_document/document_list.html", documents=documents)
