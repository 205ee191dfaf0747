"""
Integrity routes
On-demand store reconciliation and dangling reference report
"""

from flask import jsonify
from assetguard import get_tracker
from assetguard.logger import get_logger
from assetguard.presentation.routes import api

logger = get_logger("assetguard.routes.integrity")


@api.route('/reconcile', methods=['POST'])
def reconcile():
    report = get_tracker().reconcile()
    return jsonify(report.to_dict())


@api.route('/integrity', methods=['GET'])
def integrity():
    tracker = get_tracker()
    dangling = tracker.find_dangling_references()
    if dangling:
        logger.info(f"{len(dangling)} dangling references found")
    return jsonify({
        'dangling_references': [vars(ref) for ref in dangling],
        'write_failures': [
            {
                'kind': failure.kind,
                'entity_id': failure.entity_id,
                'action': failure.action,
                'error': failure.error,
                'failed_at': failure.failed_at.isoformat(),
            }
            for failure in tracker.write_failures
        ],
        'pending_writes': tracker.writer.pending_count,
    })
