"""
Dashboard blueprint.
Business report for a period: revenue, transactions, best sellers and
inventory alerts.
"""

from flask import Blueprint, jsonify, request, Response

from pos.services.pos_service import get_pos
from pos.services.report_service import export_report_text


dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')


@dashboard_bp.route('/')
def index():
    """
    Report for ``?period=today|week|month|all`` (default today).

    - Revenue, transaction count and average transaction
    - Items sold
    - Top 5 products by revenue
    - Low stock count and inventory value (whole catalog)
    """
    report = get_pos().report(request.args.get('period'))
    return jsonify(report.to_dict())


@dashboard_bp.route('/export')
def export():
    """Plain-text report for sharing."""
    report = get_pos().report(request.args.get('period'))
    return Response(export_report_text(report), mimetype='text/plain')
