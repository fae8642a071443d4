import openpyxl
from datetime import date
from pathlib import Path

from attendance_payroll.processors.salary_register_generator import SalaryRegisterGenerator


def test_register_rows_and_totals(tmp_path, composer, add_employee, mark, mark_month,
                                  checkin_criteria, weekly_criteria):
    add_employee(employee_id="EMP002", base_salary="60000")
    add_employee(employee_id="EMP001", base_salary="50000")
    mark_month("EMP001", 2025, 10)
    mark_month("EMP002", 2025, 10)
    mark("EMP001", date(2025, 10, 1), "absent", "0")

    results = [
        composer.preview("EMP002", 10, 2025, weekly_criteria("100")),
        composer.preview("EMP001", 10, 2025, checkin_criteria()),
    ]
    path = SalaryRegisterGenerator(tmp_path).generate(results, 2025, 10)

    assert Path(path).name == "salary_register_2025_10.xlsx"
    ws = openpyxl.load_workbook(path).active
    assert ws['A1'].value == "Salary Register - October 2025"
    assert ws.cell(row=3, column=1).value == "Employee ID"
    assert ws.cell(row=3, column=19).value == "Net Salary"

    # sorted by employee id
    assert ws.cell(row=4, column=1).value == "EMP001"
    assert ws.cell(row=4, column=13).value == 1
    assert ws.cell(row=4, column=19).value == 47827
    assert ws.cell(row=5, column=1).value == "EMP002"
    assert ws.cell(row=5, column=3).value == "weeklyHours"
    assert ws.cell(row=5, column=7).value is None
    assert ws.cell(row=5, column=19).value == 60000

    assert ws.cell(row=6, column=1).value == "TOTAL"
    assert ws.cell(row=6, column=4).value == 110000
    assert ws.cell(row=6, column=19).value == 107827


def test_empty_register_has_zero_totals(tmp_path):
    path = SalaryRegisterGenerator(tmp_path / "out").generate([], 2025, 2)
    ws = openpyxl.load_workbook(path).active
    assert ws['A1'].value == "Salary Register - February 2025"
    assert ws.cell(row=4, column=1).value == "TOTAL"
    assert ws.cell(row=4, column=19).value == 0
