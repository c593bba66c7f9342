"""Catalog blueprint for products and categories."""
from flask import Blueprint, jsonify, request, current_app

from pos.blueprints import get_json_body
from pos.exceptions import NotFoundError, ValidationError
from pos.models import ALL_CATEGORY_ID
from pos.services.pos_service import get_pos

catalog_bp = Blueprint('catalog', __name__, url_prefix='/products')
categories_bp = Blueprint('categories', __name__, url_prefix='/categories')


def _flag(name: str) -> bool:
    return request.args.get(name, '').lower() in ('1', 'true', 'yes')


# =====================================================
# PRODUCTS
# =====================================================

@catalog_bp.route('', methods=['GET'])
def list_products():
    """
    List products.

    Query params:
        category: category id ('all' for every category). When omitted
            together with ``q`` the whole catalog is returned; when only ``q``
            is given the currently selected category is used.
        q: case-insensitive name search
        search_barcode: also match ``q`` against barcodes
    """
    pos = get_pos()
    if 'category' in request.args or 'q' in request.args:
        products = pos.filtered_products(
            request.args.get('category') or None,
            request.args.get('q'),
            include_barcode=_flag('search_barcode'),
        )
    else:
        products = pos.list_products()
    return jsonify({'products': [p.to_dict() for p in products]})


@catalog_bp.route('', methods=['POST'])
def create_product():
    product = get_pos().add_product(get_json_body())
    return jsonify({'status': 'ok', 'product': product.to_dict()}), 201


@catalog_bp.route('/<product_id>', methods=['PATCH', 'PUT'])
def update_product(product_id):
    product = get_pos().update_product(product_id, get_json_body())
    if product is None:
        raise NotFoundError(f'Product {product_id} not found')
    return jsonify({'status': 'ok', 'product': product.to_dict()})


@catalog_bp.route('/<product_id>', methods=['DELETE'])
def delete_product(product_id):
    deleted = get_pos().delete_product(product_id)
    return jsonify({'status': 'ok', 'deleted': deleted})


@catalog_bp.route('/barcode/<path:barcode>', methods=['GET'])
def product_by_barcode(barcode):
    product = get_pos().catalog.find_by_barcode(barcode)
    if product is None:
        raise NotFoundError(f'No product found with barcode: {barcode}')
    return jsonify({'product': product.to_dict()})


# =====================================================
# CATEGORIES
# =====================================================

@categories_bp.route('', methods=['GET'])
def list_categories():
    pos = get_pos()
    return jsonify({
        'categories': [c.to_dict() for c in pos.list_categories()],
        'selected': pos.selected_category,
    })


@categories_bp.route('', methods=['POST'])
def create_category():
    category = get_pos().add_category(get_json_body())
    return jsonify({'status': 'ok', 'category': category.to_dict()}), 201


@categories_bp.route('/selected', methods=['GET'])
def selected_category():
    return jsonify({'selected': get_pos().selected_category})


@categories_bp.route('/selected', methods=['PUT'])
def select_category():
    data = get_json_body()
    category_id = data.get('category_id')
    if not isinstance(category_id, str) or not category_id:
        raise ValidationError('category_id is required')
    selected = get_pos().select_category(category_id)
    return jsonify({'status': 'ok', 'selected': selected})


@categories_bp.route('/<category_id>', methods=['PATCH', 'PUT'])
def update_category(category_id):
    if category_id == ALL_CATEGORY_ID:
        raise ValidationError("The 'all' category cannot be modified")
    category = get_pos().update_category(category_id, get_json_body())
    if category is None:
        raise NotFoundError(f'Category {category_id} not found')
    return jsonify({'status': 'ok', 'category': category.to_dict()})


@categories_bp.route('/<category_id>', methods=['DELETE'])
def delete_category(category_id):
    if category_id == ALL_CATEGORY_ID:
        raise ValidationError("The 'all' category cannot be deleted")
    pos = get_pos()
    deleted = pos.delete_category(category_id)
    current_app.logger.info(f"Category {category_id} delete requested (deleted={deleted})")
    return jsonify({'status': 'ok', 'deleted': deleted, 'selected': pos.selected_category})
