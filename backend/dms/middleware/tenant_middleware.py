from flask import request, g, jsonify
from dms.models.tenant import Tenant

# Endpoints reachable without a tenant header
PUBLIC_ENDPOINTS = {"openapi_dms", "v1.health_check", "static"}
PUBLIC_BLUEPRINTS = {"swagger_ui"}

def tenant_middleware(app):
    @app.before_request
    def load_tenant():
        if request.endpoint in PUBLIC_ENDPOINTS or request.blueprint in PUBLIC_BLUEPRINTS:
            return None

        tenant_id = request.headers.get('X-Tenant-ID')
        if not tenant_id:
            return jsonify({"error": "X-Tenant-ID header is missing"}), 400

        tenant = Tenant.query.filter_by(id=tenant_id, is_active=True).first()
        if not tenant:
            return jsonify({"error": "Invalid tenant"}), 404

        # Attach tenant to global context
        g.current_tenant = tenant
