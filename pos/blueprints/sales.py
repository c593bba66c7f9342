"""Sales blueprint for cart management, checkout and sale history."""
from flask import Blueprint, jsonify, current_app, Response

from pos.blueprints import get_json_body
from pos.exceptions import NotFoundError, ValidationError
from pos.services.pos_service import get_pos

sales_bp = Blueprint('sales', __name__, url_prefix='/sales')


def _cart_payload(pos) -> dict:
    """Cart lines plus live totals."""
    return {
        'items': [
            {**item.to_dict(), 'line_total': str(item.line_total)}
            for item in pos.cart_items()
        ],
        'summary': pos.get_summary().to_dict(),
    }


# =====================================================
# CART
# =====================================================

@sales_bp.route('/cart', methods=['GET'])
def view_cart():
    return jsonify(_cart_payload(get_pos()))


@sales_bp.route('/cart', methods=['DELETE'])
def clear_cart():
    pos = get_pos()
    pos.clear_cart()
    return jsonify(_cart_payload(pos))


@sales_bp.route('/cart/items', methods=['POST'])
def add_to_cart():
    """Add one unit of ``product_id`` to the cart."""
    data = get_json_body()
    product_id = data.get('product_id')
    if product_id is None or product_id == '':
        raise ValidationError('product_id is required')
    pos = get_pos()
    pos.add_to_cart(str(product_id))
    return jsonify(_cart_payload(pos))


@sales_bp.route('/cart/items/<product_id>', methods=['PATCH', 'PUT'])
def update_cart_item(product_id):
    data = get_json_body()
    if 'quantity' not in data:
        raise ValidationError('quantity is required')
    pos = get_pos()
    pos.update_quantity(product_id, data['quantity'])
    return jsonify(_cart_payload(pos))


@sales_bp.route('/cart/items/<product_id>', methods=['DELETE'])
def remove_cart_item(product_id):
    pos = get_pos()
    pos.remove_from_cart(product_id)
    return jsonify(_cart_payload(pos))


@sales_bp.route('/cart/scan', methods=['POST'])
def scan_barcode():
    """Barcode scanner input: exact match adds the product to the cart."""
    data = get_json_body()
    barcode = data.get('barcode')
    if not isinstance(barcode, str) or not barcode.strip():
        raise ValidationError('barcode is required')
    pos = get_pos()
    product = pos.scan_barcode(barcode)
    if product is None:
        raise NotFoundError(f'No product found with barcode: {barcode}')
    return jsonify({'product': product.to_dict(), **_cart_payload(pos)})


# =====================================================
# CHECKOUT
# =====================================================

@sales_bp.route('/checkout', methods=['POST'])
def checkout():
    """
    Complete the sale.

    An empty cart is not an error: the response carries ``sale: null``.
    """
    data = get_json_body()
    sale = get_pos().complete_sale(data.get('payment_method'))
    if sale is None:
        return jsonify({'status': 'ok', 'sale': None})
    current_app.logger.info(f"Sale {sale.id} completed ({sale.receipt_number})")
    return jsonify({'status': 'ok', 'sale': sale.to_dict()}), 201


# =====================================================
# HISTORY
# =====================================================

@sales_bp.route('', methods=['GET'])
def list_sales():
    sales = get_pos().list_sales()
    return jsonify({'sales': [s.to_dict() for s in sales]})


@sales_bp.route('/today', methods=['GET'])
def today_sales():
    pos = get_pos()
    return jsonify({
        'sales': [s.to_dict() for s in pos.today_sales()],
        'total': str(pos.today_total()),
    })


@sales_bp.route('/<sale_id>', methods=['GET'])
def sale_detail(sale_id):
    sale = get_pos().get_sale(sale_id)
    if sale is None:
        raise NotFoundError(f'Sale {sale_id} not found')
    return jsonify({'sale': sale.to_dict()})


@sales_bp.route('/<sale_id>/receipt', methods=['GET'])
def sale_receipt(sale_id):
    text = get_pos().render_receipt(sale_id)
    return Response(text, mimetype='text/plain')
