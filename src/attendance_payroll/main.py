import argparse
import json
import logging
import sys
from pathlib import Path

from .api.mock_hr import seed_demo_data
from .config.settings import BULK_MAX_WORKERS, LOG_FORMAT, LOG_LEVEL
from .database.db import SessionLocal, init_db
from .database.repository import PayrollRepository
from .errors import PayrollError
from .processors.bulk_orchestrator import BulkOrchestrator
from .processors.criteria_validator import validate_criteria
from .processors.salary_composer import SalaryComposer
from .processors.salary_register_generator import SalaryRegisterGenerator
from .utils.formatters import format_currency, format_percentage

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format=LOG_FORMAT
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calculate monthly salaries from attendance")
    parser.add_argument('--month', type=int, required=True)
    parser.add_argument('--year', type=int, required=True)
    parser.add_argument('--criteria', type=Path, required=True, help="JSON file with calculation criteria")
    parser.add_argument('--department', default=None, help="Only employees of this department")
    parser.add_argument('--commit', action='store_true', help="Save results (default is preview)")
    parser.add_argument('--register', action='store_true', help="Also write the salary register workbook")
    parser.add_argument('--seed-demo', action='store_true',
                        help="Load sample employees and generated attendance for the month first")
    return parser


def main(argv=None) -> int:
    """Main entry point for bulk salary calculation"""
    args = build_parser().parse_args(argv)
    logger.info("Starting salary calculation")

    try:
        criteria = validate_criteria(json.loads(args.criteria.read_text(encoding='utf-8')))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error(f"Cannot read criteria file {args.criteria}: {exc}")
        return 2
    except PayrollError as exc:
        logger.error(f"Invalid criteria: {exc}")
        return 2

    init_db()
    repo = PayrollRepository(SessionLocal)
    if args.seed_demo:
        store = seed_demo_data(repo, args.year, args.month)
        logger.info(f"Seeded {len(store.employees)} employees and {len(store.attendance)} attendance records")
    composer = SalaryComposer(repo, repo, repo, repo)
    orchestrator = BulkOrchestrator(composer, repo, max_workers=BULK_MAX_WORKERS)

    try:
        report = orchestrator.calculate_all(
            args.month, args.year, criteria, department_id=args.department, commit=args.commit
        )
    except PayrollError as exc:
        logger.error(f"Salary calculation aborted: {exc}")
        return 1

    print("=" * 60)
    print(f"Salaries {args.year}-{args.month:02d} ({'committed' if args.commit else 'preview'})")
    print("=" * 60)
    for result in report.results:
        line = f"  {result.employee_id:<10} {result.employee_name:<25} {format_currency(result.net_salary):>18}"
        if result.additions:
            line += f"  attendance {format_percentage(result.additions.attendance_percentage)}"
        print(line)
    for error in report.errors:
        print(f"  {error.employee_id:<10} {error.name:<25} ERROR: {error.message}")
    print("-" * 60)
    print(f"Employees: {report.total_employees}  Calculated: {report.calculated}  "
          f"Errors: {len(report.errors)}  Total net: {format_currency(report.total_net_salary)}")

    if args.register:
        filepath = SalaryRegisterGenerator().generate(report.results, args.year, args.month)
        print(f"Register written to {filepath}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
