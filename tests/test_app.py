import pytest
from datetime import date
from decimal import Decimal

from attendance_payroll.app import create_app
from attendance_payroll.models import AttendanceRecord, DayStatus
from attendance_payroll.processors.calendar_resolver import resolve_working_days

from conftest import build_employee

CRITERIA = {
    'attendanceMarkingMethod': 'checkinCheckout',
    'lateThreshold': 3,
    'halfDayThreshold': 2,
    'earlyDepartureThreshold': 0,
    'lateEarlyDepartureThreshold': 0,
}


@pytest.fixture
def app(repo, tmp_path):
    for employee_id, department_id in (("EMP001", "ENG"), ("EMP002", "OPS")):
        repo.save_employee(build_employee(employee_id, department_id=department_id))
        for day in resolve_working_days(2025, 10, ["Saturday", "Sunday"]).working_days:
            repo.save_attendance(AttendanceRecord(employee_id, day, status=DayStatus.PRESENT,
                                                  working_hours=Decimal('8')))
    repo.save_attendance(AttendanceRecord("EMP001", date(2025, 10, 1), status=DayStatus.ABSENT))

    app = create_app(repository=repo, output_dir=tmp_path)
    app.config['TESTING'] = True
    # one in-memory connection is shared, keep bulk runs sequential
    app.extensions['payroll']['orchestrator'].max_workers = 1
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def body(employee_id="EMP001", **overrides):
    data = {'employeeId': employee_id, 'month': 10, 'year': 2025, 'criteria': dict(CRITERIA)}
    data.update(overrides)
    return data


def test_preview_does_not_save(client):
    response = client.post('/api/salaries/preview', json=body())
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['status'] == 'pending'
    assert Decimal(data['perDaySalary']) == Decimal('2173')
    assert Decimal(data['netSalary']) == Decimal('47827')
    assert data['attendance']['absent'] == 1

    assert client.get('/api/salaries/EMP001/2025/10').status_code == 404


def test_calculate_then_fetch(client):
    response = client.post('/api/salaries/calculate', json=body())
    assert response.status_code == 201
    assert response.get_json()['data']['status'] == 'calculated'

    fetched = client.get('/api/salaries/EMP001/2025/10').get_json()['data']
    assert Decimal(fetched['netSalary']) == Decimal('47827')

    listing = client.get('/api/salaries?month=10&year=2025').get_json()
    assert listing['count'] == 1


def test_lifecycle_endpoints(client):
    client.post('/api/salaries/calculate', json=body())

    adjusted = client.patch('/api/salaries/EMP001/2025/10', json={'otherDeductions': '827', 'remarks': 'Advance'})
    assert adjusted.status_code == 200
    assert Decimal(adjusted.get_json()['data']['netSalary']) == Decimal('47000')

    assert client.post('/api/salaries/EMP001/2025/10/approve').status_code == 200
    again = client.post('/api/salaries/EMP001/2025/10/approve')
    assert again.status_code == 409
    assert again.get_json()['success'] is False

    paid = client.post('/api/salaries/EMP001/2025/10/paid')
    assert paid.get_json()['data']['status'] == 'paid'
    assert client.get('/api/salaries?status=paid').get_json()['count'] == 1


def test_invalid_criteria_is_400_with_field(client):
    criteria = dict(CRITERIA, lateThreshold=0)
    response = client.post('/api/salaries/preview', json=body(criteria=criteria))
    assert response.status_code == 400
    payload = response.get_json()
    assert payload['success'] is False
    assert payload['field'] == 'lateThreshold'


@pytest.mark.parametrize("payload", [
    {'month': 10, 'year': 2025, 'criteria': CRITERIA},
    {'employeeId': 'EMP001', 'month': 'October', 'year': 2025, 'criteria': CRITERIA},
    {'employeeId': 'EMP001', 'month': 10, 'year': 2025},
])
def test_malformed_requests(client, payload):
    assert client.post('/api/salaries/preview', json=payload).status_code == 400


def test_non_json_body(client):
    response = client.post('/api/salaries/preview', data="not json", content_type='text/plain')
    assert response.status_code == 400


def test_unknown_employee_is_404(client):
    response = client.post('/api/salaries/preview', json=body("EMP404"))
    assert response.status_code == 404


def test_calculate_all(client):
    response = client.post('/api/salaries/calculate-all',
                           json={'month': 10, 'year': 2025, 'criteria': CRITERIA})
    summary = response.get_json()['data']['summary']
    assert summary['totalEmployees'] == 2
    assert summary['calculated'] == 2
    assert summary['errors'] == 0
    assert Decimal(summary['totalNetSalary']) == Decimal('97827')
    assert client.get('/api/salaries?month=10&year=2025').get_json()['count'] == 2


def test_preview_all_for_department(client):
    response = client.post('/api/salaries/preview-all',
                           json={'month': 10, 'year': 2025, 'departmentId': 'OPS', 'criteria': CRITERIA})
    data = response.get_json()['data']
    assert [r['employeeId'] for r in data['results']] == ['EMP002']
    assert client.get('/api/salaries').get_json()['count'] == 0


def test_unknown_department_is_404(client):
    response = client.post('/api/salaries/preview-all',
                           json={'month': 10, 'year': 2025, 'departmentId': 'HR', 'criteria': CRITERIA})
    assert response.status_code == 404


def test_register_and_download(client, tmp_path):
    client.post('/api/salaries/calculate-all', json={'month': 10, 'year': 2025, 'criteria': CRITERIA})

    response = client.post('/api/salaries/register', json={'month': 10, 'year': 2025})
    filename = response.get_json()['file']
    assert filename == 'salary_register_2025_10.xlsx'
    assert (tmp_path / filename).exists()

    download = client.get(f'/api/download/{filename}')
    assert download.status_code == 200
    download.close()

    assert client.get('/api/download/missing.xlsx').status_code == 404


def test_adjust_other_additions(client):
    client.post('/api/salaries/calculate', json=body())

    adjusted = client.patch('/api/salaries/EMP001/2025/10', json={'otherAdditions': '500'})
    assert adjusted.status_code == 200
    data = adjusted.get_json()['data']
    assert Decimal(data['additions']['otherAdditions']) == Decimal('500')
    assert Decimal(data['netSalary']) == Decimal('48327')

    rejected = client.patch('/api/salaries/EMP001/2025/10', json={'otherAdditions': '-5'})
    assert rejected.status_code == 400
    assert rejected.get_json()['field'] == 'otherAdditions'


def test_unexpected_error_is_json_500(app, client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(app.extensions['payroll']['composer'], 'preview', boom)
    response = client.post('/api/salaries/preview', json=body())
    assert response.status_code == 500
    assert response.is_json
    assert response.get_json() == {'success': False, 'message': 'disk on fire'}


def test_http_errors_keep_their_status(client):
    assert client.get('/api/nowhere').status_code == 404
    assert client.delete('/api/salaries/preview').status_code == 405


@pytest.mark.parametrize("month", [True, 3.7])
def test_month_must_be_a_whole_number(client, month):
    response = client.post('/api/salaries/preview', json=body(month=month))
    assert response.status_code == 400
    assert response.get_json()['field'] == 'month'


def test_integral_float_month_is_accepted(client):
    response = client.post('/api/salaries/preview', json=body(month=10.0))
    assert response.status_code == 200
    assert response.get_json()['data']['month'] == 10
