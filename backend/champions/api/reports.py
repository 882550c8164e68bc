from flask import Blueprint, jsonify, request

from champions.identity import current_identity
from champions.services.reports import flag_word

reports = Blueprint('reports', __name__)


@reports.route('', methods=['POST'])
def create_report():
    data = request.get_json(silent=True) or {}
    report = flag_word(current_identity(), data)
    return jsonify({'success': True, 'report': report.to_dict()}), 201
