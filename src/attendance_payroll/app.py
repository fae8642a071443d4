import logging
from pathlib import Path

from flask import Blueprint, Flask, current_app, jsonify, request, send_file
from werkzeug.exceptions import HTTPException

from .config.settings import BULK_MAX_WORKERS, DEBUG, LOG_FORMAT, LOG_LEVEL, OUTPUT_DIR, SECRET_KEY
from .database.db import SessionLocal, init_db
from .database.repository import PayrollRepository
from .errors import (
    DataAccessError,
    InvalidScheduleError,
    MissingBaseSalaryError,
    NotFoundError,
    PayrollError,
    StatusTransitionError,
    ValidationError,
)
from .models.salary import SalaryStatus
from .processors.bulk_orchestrator import BulkOrchestrator
from .processors.criteria_validator import validate_criteria
from .processors.salary_composer import SalaryComposer
from .processors.salary_register_generator import SalaryRegisterGenerator

logger = logging.getLogger(__name__)

bp = Blueprint('salaries', __name__)

ERROR_STATUS = {
    ValidationError: 400,
    InvalidScheduleError: 400,
    MissingBaseSalaryError: 400,
    NotFoundError: 404,
    StatusTransitionError: 409,
    DataAccessError: 503,
}


def create_app(repository: PayrollRepository = None, output_dir: Path = None) -> Flask:
    """Application factory; defaults to the configured database"""
    app = Flask(__name__)
    app.config['SECRET_KEY'] = SECRET_KEY
    app.config['DEBUG'] = DEBUG

    if repository is None:
        init_db()
        repository = PayrollRepository(SessionLocal)

    composer = SalaryComposer(repository, repository, repository, repository)
    app.extensions['payroll'] = {
        'repository': repository,
        'composer': composer,
        'orchestrator': BulkOrchestrator(composer, repository, max_workers=BULK_MAX_WORKERS),
        'register': SalaryRegisterGenerator(output_dir or OUTPUT_DIR / "registers"),
    }
    app.register_blueprint(bp)
    return app


def _services():
    return current_app.extensions['payroll']


def _int_field(data, name: str) -> int:
    value = data.get(name)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(name, f"must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(name, f"must be an integer, got {value!r}") from None


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(None, "request body must be a JSON object")
    return data


# ============================================================================
# Error handling
# ============================================================================

@bp.app_errorhandler(PayrollError)
def handle_payroll_error(error: PayrollError):
    status = next((code for cls, code in ERROR_STATUS.items() if isinstance(error, cls)), 500)
    body = {'success': False, 'message': str(error)}
    if isinstance(error, ValidationError) and error.field:
        body['field'] = error.field
    logger.info(f"{request.method} {request.path} -> {status}: {error}")
    return jsonify(body), status


@bp.app_errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    if isinstance(error, HTTPException):
        return error
    logger.exception(f"{request.method} {request.path} failed")
    return jsonify({'success': False, 'message': str(error)}), 500


# ============================================================================
# Calculation endpoints
# ============================================================================

def _calculate_single(commit: bool):
    data = _json_body()
    employee_id = data.get('employeeId')
    if not employee_id:
        raise ValidationError('employeeId', "is required")
    month = _int_field(data, 'month')
    year = _int_field(data, 'year')
    criteria = validate_criteria(data.get('criteria'))

    composer = _services()['composer']
    if commit:
        result = composer.commit(employee_id, month, year, criteria)
        message = 'Salary calculated successfully'
    else:
        result = composer.preview(employee_id, month, year, criteria)
        message = 'Salary preview'

    return jsonify({'success': True, 'message': message, 'data': result.to_dict()}), (201 if commit else 200)


def _calculate_all(commit: bool):
    data = _json_body()
    month = _int_field(data, 'month')
    year = _int_field(data, 'year')
    criteria = validate_criteria(data.get('criteria'))

    report = _services()['orchestrator'].calculate_all(
        month, year, criteria, department_id=data.get('departmentId') or None, commit=commit
    )
    return jsonify({
        'success': True,
        'message': 'Salary calculation completed',
        'data': report.to_dict()
    })


@bp.route('/api/salaries/preview', methods=['POST'])
def preview_salary():
    """Calculate one employee's salary without saving it"""
    return _calculate_single(commit=False)


@bp.route('/api/salaries/calculate', methods=['POST'])
def calculate_salary():
    """Calculate and save one employee's salary"""
    return _calculate_single(commit=True)


@bp.route('/api/salaries/preview-all', methods=['POST'])
def preview_all_salaries():
    return _calculate_all(commit=False)


@bp.route('/api/salaries/calculate-all', methods=['POST'])
def calculate_all_salaries():
    return _calculate_all(commit=True)


# ============================================================================
# Salary records
# ============================================================================

@bp.route('/api/salaries')
def list_salaries():
    """List saved salaries, filtered by month/year/status/employeeId"""
    args = request.args
    month = _int_field(args, 'month') if args.get('month') else None
    year = _int_field(args, 'year') if args.get('year') else None
    salaries = _services()['repository'].list_salaries(
        month=month, year=year, status=args.get('status'), employee_id=args.get('employeeId')
    )
    return jsonify({
        'success': True,
        'count': len(salaries),
        'data': [s.to_dict() for s in salaries]
    })


@bp.route('/api/salaries/<employee_id>/<int:year>/<int:month>')
def get_salary(employee_id, year, month):
    salary = _services()['repository'].get_salary(employee_id, month, year)
    if salary is None:
        raise NotFoundError(f"No salary record for {employee_id} {year}-{month:02d}")
    return jsonify({'success': True, 'data': salary.to_dict()})


@bp.route('/api/salaries/<employee_id>/<int:year>/<int:month>/approve', methods=['POST'])
def approve_salary(employee_id, year, month):
    salary = _services()['repository'].update_salary_status(employee_id, month, year, SalaryStatus.APPROVED)
    return jsonify({'success': True, 'message': 'Salary approved successfully', 'data': salary.to_dict()})


@bp.route('/api/salaries/<employee_id>/<int:year>/<int:month>/paid', methods=['POST'])
def mark_salary_paid(employee_id, year, month):
    salary = _services()['repository'].update_salary_status(employee_id, month, year, SalaryStatus.PAID)
    return jsonify({'success': True, 'message': 'Salary marked as paid', 'data': salary.to_dict()})


@bp.route('/api/salaries/<employee_id>/<int:year>/<int:month>', methods=['PATCH'])
def adjust_salary(employee_id, year, month):
    """Manual adjustment of a calculated salary"""
    data = _json_body()
    salary = _services()['repository'].adjust_salary(
        employee_id, month, year,
        other_deductions=data.get('otherDeductions'),
        other_additions=data.get('otherAdditions'),
        remarks=data.get('remarks')
    )
    return jsonify({'success': True, 'message': 'Salary updated successfully', 'data': salary.to_dict()})


# ============================================================================
# Register export
# ============================================================================

@bp.route('/api/salaries/register', methods=['POST'])
def generate_register():
    """Write the salary register workbook for saved salaries of a month"""
    data = _json_body()
    month = _int_field(data, 'month')
    year = _int_field(data, 'year')

    services = _services()
    salaries = services['repository'].list_salaries(month=month, year=year)
    filepath = services['register'].generate(salaries, year, month)

    return jsonify({
        'success': True,
        'message': f'Salary register generated for {len(salaries)} employees',
        'file': Path(filepath).name
    })


@bp.route('/api/download/<path:filename>')
def download_file(filename):
    """Download a generated register"""
    directory = _services()['register'].output_dir
    filepath = (directory / filename).resolve()
    if filepath.parent == directory.resolve() and filepath.exists():
        return send_file(filepath, as_attachment=True)
    return jsonify({'success': False, 'message': 'File not found'}), 404


if __name__ == '__main__':
    import os
    logging.basicConfig(level=getattr(logging, LOG_LEVEL), format=LOG_FORMAT)
    port = int(os.getenv('PORT', 5000))
    create_app().run(host='0.0.0.0', port=port, debug=DEBUG)
