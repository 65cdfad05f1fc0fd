from flask import current_app, jsonify
from . import v1_bp

@v1_bp.route('/health', methods=['GET'])
def health_check():
    return jsonify({
        "status": "ok",
        "service": "dms-backend",
        "documents_enabled": bool(current_app.config.get("DOCUMENTS_ENABLED", True)),
    })
