import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..config.settings import BULK_MAX_WORKERS
from ..errors import NotFoundError
from ..models.criteria import Criteria
from ..models.employee import Employee
from ..models.salary import SalaryCalculationResult
from .salary_composer import SalaryComposer

logger = logging.getLogger(__name__)


@dataclass
class BulkCalculationError:
    employee_id: str
    name: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {'employeeId': self.employee_id, 'name': self.name, 'message': self.message}


@dataclass
class BulkCalculationReport:
    """Outcome of a calculate-all run"""
    total_employees: int = 0
    results: List[SalaryCalculationResult] = field(default_factory=list)
    errors: List[BulkCalculationError] = field(default_factory=list)

    @property
    def calculated(self) -> int:
        return len(self.results)

    @property
    def total_net_salary(self) -> Decimal:
        return sum((r.net_salary for r in self.results), Decimal('0'))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'summary': {
                'totalEmployees': self.total_employees,
                'calculated': self.calculated,
                'errors': len(self.errors),
                'totalNetSalary': str(self.total_net_salary),
            },
            'results': [r.to_dict() for r in self.results],
            'errors': [e.to_dict() for e in self.errors],
        }


class BulkOrchestrator:
    """Run the salary composer for every eligible employee"""

    def __init__(self, composer: SalaryComposer, directory, max_workers: int = BULK_MAX_WORKERS):
        self.composer = composer
        self.directory = directory
        self.max_workers = max(1, max_workers)

    def calculate_all(self, month: int, year: int, criteria: Criteria,
                      department_id: Optional[str] = None, commit: bool = False) -> BulkCalculationReport:
        if department_id is not None and self.directory.get_department(department_id) is None:
            raise NotFoundError(f"Department {department_id} not found")

        employees = self.directory.list_employees(department_id=department_id, active_only=True)
        report = BulkCalculationReport(total_employees=len(employees))
        logger.info(f"Calculating salaries for {len(employees)} employees, {year}-{month:02d} "
                    f"({'commit' if commit else 'preview'})")

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                (employee, executor.submit(self._calculate_one, employee, month, year, criteria, commit))
                for employee in employees
            ]
            for employee, future in futures:
                try:
                    report.results.append(future.result())
                except Exception as exc:
                    logger.warning(f"Salary calculation failed for {employee.employee_id}: {exc}")
                    report.errors.append(BulkCalculationError(
                        employee_id=employee.employee_id,
                        name=employee.name,
                        message=str(exc),
                    ))

        report.results.sort(key=lambda r: r.employee_id)
        report.errors.sort(key=lambda e: e.employee_id)
        logger.info(f"Bulk calculation done: {report.calculated} calculated, {len(report.errors)} errors")
        return report

    def _calculate_one(self, employee: Employee, month: int, year: int,
                       criteria: Criteria, commit: bool) -> SalaryCalculationResult:
        if commit:
            return self.composer.commit(employee.employee_id, month, year, criteria)
        return self.composer.compose(employee, month, year, criteria)
