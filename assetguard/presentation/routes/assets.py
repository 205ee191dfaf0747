"""
Asset routes
Snapshot, asset list/dashboard reads and the asset and assignment operations
"""

from flask import jsonify, request
from assetguard import get_tracker
from assetguard.buisness.core.records import Asset
from assetguard.presentation.routes import api, json_body
from assetguard.services.core.asset_service import AssetService


@api.route('/snapshot', methods=['GET'])
def snapshot():
    """Full repository contents plus the loading flag"""
    return jsonify(get_tracker().snapshot().to_dict())


@api.route('/dashboard', methods=['GET'])
def dashboard():
    return jsonify(AssetService.dashboard_counts(get_tracker().snapshot()))


@api.route('/assets', methods=['GET'])
def list_assets():
    assets = AssetService.filter_assets(
        get_tracker().snapshot(),
        status=request.args.get('status'),
        category=request.args.get('category'),
        search=request.args.get('search'),
    )
    return jsonify([asset.to_row() for asset in assets])


@api.route('/assets', methods=['POST'])
def create_asset():
    asset = Asset.from_row(json_body('asset'))
    result = get_tracker().create_asset(asset)
    return jsonify(result.to_dict()), 201


@api.route('/assets/<asset_id>', methods=['PUT'])
def update_asset(asset_id):
    payload = dict(json_body('asset'), id=asset_id)
    result = get_tracker().update_asset(Asset.from_row(payload))
    return jsonify(result.to_dict())


@api.route('/assets/<asset_id>', methods=['DELETE'])
def delete_asset(asset_id):
    return jsonify(get_tracker().delete_asset(asset_id).to_dict())


@api.route('/assets/<asset_id>/assign', methods=['POST'])
def assign_asset(asset_id):
    payload = json_body('assignment', 'employeeId')
    result = get_tracker().assign_asset(
        asset_id,
        payload['employeeId'],
        expected_return_date=payload.get('expectedReturnDate'),
    )
    return jsonify(result.to_dict()), 201


@api.route('/assets/<asset_id>/return', methods=['POST'])
def return_asset(asset_id):
    # Body is optional here
    payload = request.get_json(silent=True) or {}
    result = get_tracker().return_asset(asset_id, notes=payload.get('notes'))
    return jsonify(result.to_dict())
