"""
Employee routes
Directory search, held assets and employee creation
"""

from flask import jsonify, request
from assetguard import get_tracker
from assetguard.buisness.core.records import Employee
from assetguard.presentation.routes import api, json_body
from assetguard.services.core.employee_service import EmployeeService


@api.route('/employees', methods=['GET'])
def list_employees():
    employees = EmployeeService.search(get_tracker().snapshot(), request.args.get('search'))
    return jsonify([employee.to_row() for employee in employees])


@api.route('/employees', methods=['POST'])
def create_employee():
    employee = Employee.from_row(json_body('employee'))
    return jsonify(get_tracker().create_employee(employee).to_dict()), 201


@api.route('/employees/<employee_id>/assets', methods=['GET'])
def employee_assets(employee_id):
    snapshot = get_tracker().snapshot()
    return jsonify({
        'assets': [a.to_row() for a in EmployeeService.assets_held_by(snapshot, employee_id)],
        'history': [a.to_row() for a in EmployeeService.assignment_history(snapshot, employee_id)],
    })
