# dms/api/v1/cms.py
from flask import g, request, jsonify
from flask_jwt_extended import jwt_required
from dms.admin.fields import AddExistingAutocompleter
from dms.admin.page_form import build_page_fields
from dms.application.cms.create_page import create_page as create_page_service
from dms.application.cms.update_page import update_page as update_page_service
from dms.application.cms.publish_page import publish_page as publish_page_service
from dms.application.cms.unpublish_page import unpublish_page as unpublish_page_service
from dms.application.cms.delete_page import delete_page as delete_page_service
from dms.application.document_sets.create_document_set import create_document_set
from dms.application.document_sets.attach_document_set import (
    attach_document_set,
    unlink_document_set,
)
from dms.domain.lifecycle.page import IllegalTransition
from dms.models.page import Page
from dms.normalizers.page import normalize_page
from dms.normalizers.document import normalize_document
from dms.normalizers.document_set import normalize_document_set
from dms.plugins.context import context_from_request
from dms.plugins.document_sets import (
    DOCUMENT_SETS_FIELD,
    get_all_documents,
    get_document_sets,
    get_title_with_number_of_documents,
)
from dms.utils.decorators import (
    tenant_required,
    roles_required,
    permission_required,
    feature_enabled,
)
from dms.utils.permissions import DOCUMENT_ADMIN_PERMISSIONS
from . import v1_bp

EDITOR_ROLES = ("admin", "editor")


def service_error(exc: ValueError):
    message = str(exc)
    if isinstance(exc, IllegalTransition):
        status = 409
    elif "not found" in message.lower():
        status = 404
    else:
        status = 400
    return jsonify({"error": message}), status


def _admin_page_or_404(page_id):
    return Page.query.filter_by(
        id=page_id,
        tenant_id=g.current_tenant.id,
    ).first_or_404()

# ------------------------
# Pages
# ------------------------

@v1_bp.route("/pages", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def create_page():
    data = request.get_json(silent=True) or {}

    try:
        page = create_page_service(context=context_from_request(), data=data)
    except ValueError as exc:
        if "already exists" in str(exc):
            return jsonify({"error": str(exc)}), 409
        return service_error(exc)

    return jsonify({
        "id": page.id,
        "message": "Page created successfully"
    }), 201

@v1_bp.route("/pages", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def list_pages():
    status = request.args.get("status")  # draft | published | None
    page_num = request.args.get("page", 1, type=int)
    per_page = min(request.args.get("per_page", 10, type=int), 100)

    query = Page.query.filter_by(tenant_id=g.current_tenant.id, deleted_at=None)
    if status:
        query = query.filter_by(status=status)

    pagination = query.order_by(Page.created_at.desc())\
        .paginate(page=page_num, per_page=per_page, error_out=False)

    return jsonify({
        "items": [
            {
                "id": p.id,
                "title": p.title,
                "title_with_document_count": get_title_with_number_of_documents(p),
                "slug": p.slug,
                "status": p.status,
            }
            for p in pagination.items
        ],
        "pagination": {
            "page": page_num,
            "per_page": per_page,
            "total": pagination.total,
            "total_pages": pagination.pages,
        },
    })

@v1_bp.route("/pages/<slug>", methods=["GET"])
@jwt_required()
@tenant_required
@feature_enabled("cms")
def get_page(slug):
    page = Page.query.filter_by(
        tenant_id=g.current_tenant.id,
        slug=slug,
        status="published"
    ).first_or_404()

    return jsonify(normalize_page(page, admin=False))

@v1_bp.route("/pages/id/<page_id>", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def get_page_by_id(page_id):
    page = _admin_page_or_404(page_id)
    return jsonify(normalize_page(page, admin=True))

@v1_bp.route("/pages/id/<page_id>/fields", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def get_page_fields(page_id):
    """Edit screen definition, including tabs added by page extensions."""
    page = _admin_page_or_404(page_id)
    fields = build_page_fields(page, context_from_request())

    return jsonify({
        "page_id": page.id,
        "fields": fields.to_dict(),
    })

@v1_bp.route("/pages/<page_id>", methods=["PUT"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def update_page(page_id):
    data = request.get_json(silent=True) or {}

    try:
        update_page_service(page_id=page_id, context=context_from_request(), data=data)
    except ValueError as exc:
        return service_error(exc)

    return jsonify({"message": "Page updated successfully"}), 200

@v1_bp.route("/pages/<page_id>/publish", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def publish_page(page_id):
    try:
        result = publish_page_service(page_id=page_id, context=context_from_request())
    except ValueError as exc:
        return service_error(exc)

    return jsonify({
        "message": "Page published",
        "version": result["version"]
    }), 200

@v1_bp.route("/pages/<page_id>/unpublish", methods=["POST"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def unpublish_page(page_id):
    try:
        result = unpublish_page_service(page_id=page_id, context=context_from_request())
    except ValueError as exc:
        return service_error(exc)

    return jsonify({
        "message": "Page unpublished successfully",
        "version": result["version"]
    }), 200

@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
@feature_enabled("cms")
def delete_page(page_id):
    try:
        delete_page_service(page_id=page_id, context=context_from_request())
    except ValueError as exc:
        return service_error(exc)

    return jsonify({"message": "Page deleted successfully"}), 200

# ------------------------
# Document sets on a page
# ------------------------

@v1_bp.route("/pages/<page_id>/document-sets", methods=["GET"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def list_page_document_sets(page_id):
    page = _admin_page_or_404(page_id)

    return jsonify([
        normalize_document_set(ds, admin=True, include_documents=True)
        for ds in get_document_sets(page)
    ])

@v1_bp.route("/pages/<page_id>/document-sets", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def create_page_document_set(page_id):
    data = request.get_json(silent=True) or {}

    try:
        document_set = create_document_set(
            context=context_from_request(),
            title=data.get("title"),
            page_id=page_id,
        )
    except ValueError as exc:
        return service_error(exc)

    return jsonify({
        "id": document_set.id,
        "message": "Document set created successfully"
    }), 201

@v1_bp.route("/pages/<page_id>/document-sets/search", methods=["GET"])
@jwt_required()
@tenant_required
@roles_required(*EDITOR_ROLES)
def search_document_sets(page_id):
    """Add-existing search of the page's Document Sets grid."""
    page = _admin_page_or_404(page_id)
    fields = build_page_fields(page, context_from_request())

    grid = fields.data_field(DOCUMENT_SETS_FIELD)
    if grid is None:
        return jsonify({"error": "Document sets are not available"}), 403

    autocompleter = grid.config.get_component_by_type(AddExistingAutocompleter)
    results = autocompleter.search(request.args.get("q"))

    return jsonify([normalize_document_set(ds) for ds in results])

@v1_bp.route("/pages/<page_id>/document-sets/<document_set_id>", methods=["POST"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def attach_page_document_set(page_id, document_set_id):
    try:
        document_set = attach_document_set(
            page_id=page_id,
            document_set_id=document_set_id,
            context=context_from_request(),
        )
    except ValueError as exc:
        return service_error(exc)

    return jsonify(normalize_document_set(document_set)), 200

@v1_bp.route("/pages/<page_id>/document-sets/<document_set_id>", methods=["DELETE"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def unlink_page_document_set(page_id, document_set_id):
    try:
        unlink_document_set(
            page_id=page_id,
            document_set_id=document_set_id,
            context=context_from_request(),
        )
    except ValueError as exc:
        return service_error(exc)

    return jsonify({"message": "Document set unlinked"}), 200

@v1_bp.route("/pages/<page_id>/documents", methods=["GET"])
@jwt_required()
@tenant_required
@permission_required(*DOCUMENT_ADMIN_PERMISSIONS)
def list_page_documents(page_id):
    page = _admin_page_or_404(page_id)

    return jsonify({
        "title": get_title_with_number_of_documents(page),
        "documents": [
            normalize_document(d, admin=True) for d in get_all_documents(page)
        ],
    })
