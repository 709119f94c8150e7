"""
Main application routes - health check.
"""

from flask import Blueprint, jsonify
from datetime import datetime

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    """Health check for load balancers."""
    return jsonify({
        'status': 'OK',
        'message': 'API is working',
        'timestamp': datetime.utcnow().isoformat()
    })
