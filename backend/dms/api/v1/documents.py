# dms/api/v1/documents.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from dms.application.documents.create_document import create_document as create_document_service
from dms.application.documents.update_document import update_document as update_document_service
from dms.application.documents.delete_document import delete_document as delete_document_service
from dms.application.document_sets.create_document_set import create_document_set as create_document_set_service
from dms.application.document_sets.link_document import link_document as link_document_service
from dms.models.document import Document
from dms.models.document_set import DocumentSet
from dms.normalizers.document import normalize_document
from dms.normalizers.document_set import normalize_document_set
from dms.plugins.context import context_from_request
from dms.utils.decorators import tenant_required, permission_required, feature_enabled
from dms.utils.permissions import DOCUMENT_ADMIN_PERMISSIONS
from .cms import service_error
from . import v1_bp


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}

# ------------------------
# Documents
# ------------------------

@v1_bp.route("/documents", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
@feature_enabled("documents")
def create_document():
    data = request.form

    try:
        document = create_document_service(
            context=context_from_request(),
            file=request.files.get("file"),
            title=data.get("title"),
            embargoed_until_published=_as_bool(data.get("embargoed_until_published", False)),
        )
    except ValueError as exc:
        return service_error(exc)

    return jsonify({
        "id": document.id,
        "message": "Document created successfully"
    }), 201

@v1_bp.route("/documents/<document_id>", methods=["GET"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def get_document(document_id):
    document = Document.query.filter_by(
        id=document_id,
        tenant_id=g.current_tenant.id,
    ).first_or_404()

    data = normalize_document(document, admin=True)
    data["document_sets"] = [
        normalize_document_set(ds) for ds in document.document_sets
    ]
    data["related_pages"] = [
        {"id": p.id, "title": p.title} for p in document.related_pages()
    ]
    return jsonify(data)

@v1_bp.route("/documents/<document_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def update_document(document_id):
    data = request.get_json(silent=True) or {}
    if "embargoed_until_published" in data:
        data["embargoed_until_published"] = _as_bool(data["embargoed_until_published"])

    try:
        update_document_service(
            document_id=document_id,
            context=context_from_request(),
            data=data,
            if_unmodified_since=request.headers.get("If-Unmodified-Since"),
        )
    except ValueError as exc:
        return service_error(exc)

    return jsonify({"message": "Document updated successfully"}), 200

@v1_bp.route("/documents/<document_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def delete_document(document_id):
    try:
        delete_document_service(document_id=document_id, context=context_from_request())
    except ValueError as exc:
        return service_error(exc)

    return jsonify({"message": "Document deleted successfully"}), 200

# ------------------------
# Document sets
# ------------------------

@v1_bp.route("/document-sets", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def create_document_set():
    """Create an unassigned document set."""
    data = request.get_json(silent=True) or {}

    try:
        document_set = create_document_set_service(
            context=context_from_request(),
            title=data.get("title"),
        )
    except ValueError as exc:
        return service_error(exc)

    return jsonify({
        "id": document_set.id,
        "message": "Document set created successfully"
    }), 201

@v1_bp.route("/document-sets/<document_set_id>", methods=["GET"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def get_document_set(document_set_id):
    document_set = DocumentSet.query.filter_by(
        id=document_set_id,
        tenant_id=g.current_tenant.id,
    ).first_or_404()

    return jsonify(normalize_document_set(document_set, admin=True, include_documents=True))

@v1_bp.route("/document-sets/<document_set_id>/documents", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def link_document(document_set_id):
    data = request.get_json(silent=True) or {}
    document_id = data.get("document_id")
    if not document_id:
        return jsonify({"error": "document_id is required"}), 400

    try:
        link = link_document_service(
            document_set_id=document_set_id,
            document_id=document_id,
            context=context_from_request(),
        )
    except LookupError as exc:
        return jsonify({"error": str(exc), "code": getattr(exc, "code", "not_found")}), 404

    return jsonify({
        "document_set_id": link.document_set_id,
        "document_id": link.document_id,
        "sort_order": link.sort_order,
    }), 200
