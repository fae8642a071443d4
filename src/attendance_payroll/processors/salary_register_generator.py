import openpyxl
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter
from pathlib import Path
from typing import List, Optional
from decimal import Decimal
from ..models.salary import SalaryCalculationResult
from ..config.settings import OUTPUT_DIR
from ..utils.formatters import format_period


class SalaryRegisterGenerator:
    """Generate the monthly salary register for all calculated employees"""

    HEADERS = [
        'Employee ID', 'Name', 'Method', 'Base Salary', 'Working Days', 'Per Day',
        'Present', 'Late', 'Half Day', 'Early Dep.', 'Late+Early', 'Leave', 'Absent', 'Missing',
        'Absent Equiv.', 'Deductions', 'Additions', 'Bonus', 'Net Salary', 'Status'
    ]
    MONEY_COLUMNS = {4, 6, 16, 17, 18, 19}

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = Path(output_dir) if output_dir else OUTPUT_DIR / "registers"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate(self, results: List[SalaryCalculationResult], year: int, month: int) -> str:
        """Generate register workbook, returns the file path"""

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = f"{year}-{month:02d} Salaries"

        bold_font = Font(bold=True)
        title_font = Font(bold=True, size=12)
        red_font = Font(color="FF0000")
        header_fill = PatternFill(start_color="B4C7E7", end_color="B4C7E7", fill_type="solid")
        total_fill = PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid")
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        # Title
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(self.HEADERS))
        ws['A1'] = f"Salary Register - {format_period(year, month)}"
        ws['A1'].font = title_font
        ws['A1'].alignment = Alignment(horizontal='center')

        # Headers
        header_row = 3
        for col_idx, header in enumerate(self.HEADERS, start=1):
            cell = ws.cell(row=header_row, column=col_idx)
            cell.value = header
            cell.font = bold_font
            cell.fill = header_fill
            cell.border = thin_border
            cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
            ws.column_dimensions[get_column_letter(col_idx)].width = 14
        ws.column_dimensions['B'].width = 25

        # Data rows
        row = header_row + 1
        totals = {'base': Decimal('0'), 'deductions': Decimal('0'),
                  'additions': Decimal('0'), 'net': Decimal('0')}

        for result in sorted(results, key=lambda r: r.employee_id):
            counts = result.attendance
            bonus = result.additions.perfect_attendance_bonus if result.additions else Decimal('0')
            values = [
                result.employee_id,
                result.employee_name,
                result.marking_method.value,
                float(result.base_salary),
                result.total_working_days,
                float(result.per_day_salary),
                counts.present if counts else None,
                counts.late if counts else None,
                counts.half_day if counts else None,
                counts.early_departure if counts else None,
                counts.late_early_departure if counts else None,
                counts.leave if counts else None,
                counts.absent if counts else None,
                counts.missing if counts else None,
                result.deductions.absent_day_equivalents if counts else None,
                float(result.deductions.total_deductions),
                float(result.total_additions),
                float(bonus),
                float(result.net_salary),
                result.status.value,
            ]
            for col_idx, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col_idx, value=value)
                cell.border = thin_border
                if col_idx in self.MONEY_COLUMNS:
                    cell.number_format = '#,##0.00'
            if result.net_salary < 0:
                ws.cell(row=row, column=19).font = red_font

            totals['base'] += result.base_salary
            totals['deductions'] += result.deductions.total_deductions
            totals['additions'] += result.total_additions
            totals['net'] += result.net_salary
            row += 1

        # Totals row
        ws.cell(row=row, column=1, value="TOTAL").font = bold_font
        for col_idx, key in ((4, 'base'), (16, 'deductions'), (17, 'additions'), (19, 'net')):
            cell = ws.cell(row=row, column=col_idx, value=float(totals[key]))
            cell.font = bold_font
            cell.number_format = '#,##0.00'
        for col_idx in range(1, len(self.HEADERS) + 1):
            ws.cell(row=row, column=col_idx).fill = total_fill
            ws.cell(row=row, column=col_idx).border = thin_border

        ws.freeze_panes = ws.cell(row=header_row + 1, column=3)

        filename = f"salary_register_{year}_{month:02d}.xlsx"
        filepath = self.output_dir / filename
        wb.save(filepath)

        return str(filepath)
