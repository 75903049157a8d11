from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter
from io import BytesIO


TYPE_LABELS = {
    'task': 'Task',
    'exam': 'Summative exam'
}

GRADING_COLUMNS = [
    ("Week", 8),
    ("Year", 8),
    ("Assigned date", 14),
    ("Teacher", 25),
    ("Class", 15),
    ("Subject", 25),
    ("Learning goal", 40),
    ("Type", 16),
    ("Graded", 10),
    ("Graded at", 18)
]

GRADED_FILL = PatternFill(start_color="E2EFDA", end_color="E2EFDA", fill_type="solid")
UNGRADED_FILL = PatternFill(start_color="FFF2CC", end_color="FFF2CC", fill_type="solid")

DATE_FORMAT = 'yyyy-mm-dd'
DATETIME_FORMAT = 'yyyy-mm-dd hh:mm'


def create_styled_workbook(title, columns, rows, row_fill=None, number_formats=None):
    """Write ``rows`` under a styled header row and return the saved workbook.

    ``columns`` is a list of ``(header, width)`` pairs. ``row_fill`` picks a
    background for each row; rows without one stay white. ``number_formats``
    maps 1-based column numbers to Excel number formats.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = title

    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    header_font = Font(name='Arial', size=12, bold=True, color="FFFFFF")
    header_alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)

    data_font = Font(name='Arial', size=11)
    data_alignment = Alignment(horizontal='left', vertical='top', wrap_text=True)

    side = Side(style='thin')
    border = Border(left=side, right=side, top=side, bottom=side)

    for col_num, (header, width) in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col_num, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = header_alignment
        cell.border = border
        ws.column_dimensions[get_column_letter(col_num)].width = width

    for row_num, row in enumerate(rows, 2):
        fill = row_fill(row) if row_fill else None
        for col_num, value in enumerate(row, 1):
            cell = ws.cell(row=row_num, column=col_num, value=value)
            cell.font = data_font
            cell.alignment = data_alignment
            cell.border = border
            if number_formats and col_num in number_formats:
                cell.number_format = number_formats[col_num]
            if fill:
                cell.fill = fill

    ws.freeze_panes = 'A2'
    ws.auto_filter.ref = f"A1:{get_column_letter(len(columns))}{max(len(rows) + 1, 1)}"

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output


def export_grading_status_to_excel(rows):
    """One line per (assignment, class) pair from ``get_assignment_rows``."""
    data = []
    for assignment, school_class, status, teacher in rows:
        data.append([
            assignment.week_number,
            assignment.year,
            assignment.assigned_date,
            teacher.full_name,
            school_class.display_name,
            assignment.subject,
            assignment.learning_goal,
            TYPE_LABELS.get(assignment.type, assignment.type),
            'Yes' if status.is_graded else 'No',
            status.graded_at
        ])

    return create_styled_workbook(
        "Grading status",
        GRADING_COLUMNS,
        data,
        row_fill=lambda row: GRADED_FILL if row[8] == 'Yes' else UNGRADED_FILL,
        number_formats={3: DATE_FORMAT, 10: DATETIME_FORMAT}
    )


