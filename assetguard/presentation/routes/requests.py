"""
Request routes
Pending queue/history, approval candidates and the approve/reject workflow
"""

from flask import jsonify
from assetguard import get_tracker
from assetguard.buisness.core.records import AssetRequest, RequestStatus
from assetguard.presentation.routes import api, json_body
from assetguard.services.core.request_service import RequestService


@api.route('/requests', methods=['GET'])
def list_requests():
    split = RequestService.split(get_tracker().snapshot())
    return jsonify({key: [r.to_row() for r in requests] for key, requests in split.items()})


@api.route('/requests', methods=['POST'])
def create_request():
    payload = json_body('request')
    payload.setdefault('status', RequestStatus.PENDING)
    request_record = AssetRequest.from_row(payload)
    return jsonify(get_tracker().create_request(request_record).to_dict()), 201


@api.route('/requests/<request_id>/candidates', methods=['GET'])
def request_candidates(request_id):
    return jsonify([asset.to_row() for asset in get_tracker().candidate_assets(request_id)])


@api.route('/requests/<request_id>/approve', methods=['POST'])
def approve_request(request_id):
    payload = json_body('request', 'assetId')
    return jsonify(get_tracker().approve_request(request_id, payload['assetId']).to_dict())


@api.route('/requests/<request_id>/reject', methods=['POST'])
def reject_request(request_id):
    return jsonify(get_tracker().reject_request(request_id).to_dict())
