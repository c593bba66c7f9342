"""Main blueprint - service status."""
from flask import Blueprint, jsonify

from pos.services.pos_service import get_pos

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    """Liveness check that also touches storage."""
    pos = get_pos()
    return jsonify({
        'status': 'ok',
        'products': len(pos.list_products()),
        'cart_items': len(pos.cart),
    })
