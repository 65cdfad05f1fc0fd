from flask import Flask, send_file, current_app
from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .api.v1.add_document import add_document_bp
from .middleware.tenant_middleware import tenant_middleware
from .errors import register_error_handlers
from .plugins.registry import PageExtensionRegistry
from .plugins.document_sets import DocumentSetsExtension
from .utils.media import register_media_cleanup
from flask_swagger_ui import get_swaggerui_blueprint
import os


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    register_media_cleanup()

    # -------------------------------------------------
    # Page extensions (lifecycle hooks + CMS fields)
    # -------------------------------------------------
    page_extensions = PageExtensionRegistry()
    page_extensions.register(DocumentSetsExtension())
    page_extensions.init_app(app)

    # -------------------------------------------------
    # Middleware
    # -------------------------------------------------
    tenant_middleware(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    app.register_blueprint(add_document_bp, url_prefix="/admin/pages/adddocument")
    register_error_handlers(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC, NO TENANT)
    # -------------------------------------------------
    @app.route("/openapi/dms.yaml", methods=["GET"], endpoint="openapi_dms")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "dms_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("dms_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/dms.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Document Sets API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    return app
