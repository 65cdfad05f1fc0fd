from functools import wraps
from flask import g, jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity
from dms.extensions import db
from dms.models.user import User
from .permissions import has_permission

def tenant_required(fn):
    """Match the token's tenant claim and load ``g.current_user``."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        tenant = getattr(g, "current_tenant", None)
        if not tenant:
            return jsonify({"error": "Tenant context missing"}), 400

        claims = get_jwt()
        if claims.get("tenant_id") != tenant.id:
            return jsonify({"error": "Tenant mismatch"}), 403

        user = db.session.get(User, get_jwt_identity())
        if not user or user.tenant_id != tenant.id or not user.is_active:
            return jsonify({"error": "User not found or disabled"}), 403

        g.current_user = user
        return fn(*args, **kwargs)
    return wrapper

def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if get_jwt().get("role") not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator

def permission_required(*codes):
    """Requires ``tenant_required`` to have run first."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not has_permission(getattr(g, "current_user", None), codes):
                return jsonify({"error": "Insufficient permissions"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator

def feature_enabled(feature_name):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            tenant = g.current_tenant
            known = (
                hasattr(tenant, f"enable_{feature_name}")
                or feature_name in (tenant.features or {})
            )

            if not known:
                return jsonify({"error": "Feature not recognized"}), 400

            if not tenant.has_feature(feature_name):
                return jsonify({
                    "error": f"Feature '{feature_name}' is disabled for this tenant"
                }), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
