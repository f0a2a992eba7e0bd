from flask import jsonify

from . import ops_health_bp


@ops_health_bp.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok'})
