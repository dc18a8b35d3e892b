from flask import jsonify
from clp.extensions import landing_page_cache
from . import v1_bp

@v1_bp.route('/health', methods=['GET'])
def health_check():
    return jsonify({
        "status": "ok",
        "service": "custom-landing-pages",
        "cache_entries": len(landing_page_cache.cache),
    })
