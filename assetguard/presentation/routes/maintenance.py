"""
Maintenance routes
"""

from flask import jsonify
from assetguard import get_tracker
from assetguard.buisness.core.records import MaintenanceLog
from assetguard.presentation.routes import api, json_body


@api.route('/maintenance', methods=['POST'])
def add_maintenance_log():
    log = MaintenanceLog.from_row(json_body('maintenance_log'))
    return jsonify(get_tracker().add_maintenance_log(log).to_dict()), 201


@api.route('/maintenance/<log_id>', methods=['PATCH'])
def update_maintenance_log(log_id):
    payload = json_body('maintenance_log', 'status')
    return jsonify(get_tracker().update_maintenance_log(log_id, payload['status']).to_dict())
