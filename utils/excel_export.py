"""
Excel Export Module
===================

Spreadsheet rendering of survey report documents.
"""

from io import BytesIO
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter


HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
HEADER_FILL = PatternFill(start_color="2C5282", end_color="2C5282", fill_type="solid")
SECTION_FILL = PatternFill(start_color="E2E8F0", end_color="E2E8F0", fill_type="solid")

THIN_BORDER = Border(
    left=Side(style='thin', color='CCCCCC'),
    right=Side(style='thin', color='CCCCCC'),
    top=Side(style='thin', color='CCCCCC'),
    bottom=Side(style='thin', color='CCCCCC')
)


def _header_row(ws, row, headers):
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = THIN_BORDER


def _write_section(ws, row, section):
    """Writes one question section, returns the next free row"""
    title = ws.cell(row=row, column=1, value=section['question_text'])
    title.font = Font(bold=True)
    for col in range(1, 4):
        ws.cell(row=row, column=col).fill = SECTION_FILL
    row += 1

    if section['kind'] == 'distribution':
        _header_row(ws, row, ["Option", "Count", "Percent"])
        row += 1
        for result in section['results']:
            ws.cell(row=row, column=1, value=result['option']).border = THIN_BORDER
            ws.cell(row=row, column=2, value=result['count']).border = THIN_BORDER
            ws.cell(row=row, column=3, value=f"{result['percent']}%").border = THIN_BORDER
            row += 1
    elif section['kind'] == 'rating':
        ws.cell(row=row, column=1, value="Answers")
        ws.cell(row=row, column=2, value=section['count'])
        row += 1
        ws.cell(row=row, column=1, value="Average")
        ws.cell(row=row, column=2, value=section['average'] if section['average'] is not None else "-")
        row += 1
    else:
        ws.cell(row=row, column=1, value="Answers")
        ws.cell(row=row, column=2, value=section['count'])
        row += 1
        for text in section['answers']:
            ws.cell(row=row, column=1, value=text).alignment = Alignment(wrap_text=True, vertical="top")
            row += 1

    return row + 1


def generate_report_excel(document):
    """
    Renders a report document (see modules.reports.aggregation.build_report)

    One worksheet per report page, preceded by a summary sheet.

    Args:
        document (dict): Report document

    Returns:
        BytesIO: Buffer with the .xlsx file
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Summary"

    survey = document['survey']
    summary = document['summary']

    ws['A1'] = f"Survey report: {survey['title']}"
    ws['A1'].font = Font(bold=True, size=14)
    ws['A2'] = f"Status: {survey['status']}"
    ws['A3'] = f"Total responses: {summary['total_responses']}"
    ws['A4'] = f"Questions: {summary['question_count']}"
    if survey.get('description'):
        ws['A5'] = survey['description']
    ws.column_dimensions['A'].width = 60

    for page in document['pages']:
        sheet = wb.create_sheet(title=f"Page {page['number']}")
        row = 1
        for section in page['sections']:
            row = _write_section(sheet, row, section)

        sheet.column_dimensions[get_column_letter(1)].width = 50
        sheet.column_dimensions[get_column_letter(2)].width = 12
        sheet.column_dimensions[get_column_letter(3)].width = 12

    output = BytesIO()
    wb.save(output)
    output.seek(0)

    return output
