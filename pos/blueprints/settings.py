"""Settings blueprint: tax, business information and receipt layout."""
from flask import Blueprint, jsonify

from pos.blueprints import get_json_body
from pos.services.pos_service import get_pos

settings_bp = Blueprint('settings', __name__, url_prefix='/settings')


@settings_bp.route('/tax', methods=['GET'])
def get_tax():
    return jsonify(get_pos().get_tax_settings().to_dict())


@settings_bp.route('/tax', methods=['PUT', 'PATCH'])
def update_tax():
    settings = get_pos().update_tax_settings(get_json_body())
    return jsonify(settings.to_dict())


@settings_bp.route('/business', methods=['GET'])
def get_business():
    return jsonify(get_pos().get_business_info().to_dict())


@settings_bp.route('/business', methods=['PUT', 'PATCH'])
def update_business():
    info = get_pos().update_business_info(get_json_body())
    return jsonify(info.to_dict())


@settings_bp.route('/receipt', methods=['GET'])
def get_receipt():
    return jsonify(get_pos().get_receipt_settings().to_dict())


@settings_bp.route('/receipt', methods=['PUT', 'PATCH'])
def update_receipt():
    settings = get_pos().update_receipt_settings(get_json_body())
    return jsonify(settings.to_dict())
