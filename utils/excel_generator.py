from openpyxl import Workbook
from openpyxl.cell import MergedCell
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter
from django.utils import timezone


class ExcelReportGenerator:
    '''Base class for generating Excel reports'''

    def __init__(self, title):
        self.title = title
        self.workbook = Workbook()
        self.workbook.remove(self.workbook.active)  # Start without the default sheet

        self.header_font = Font(name='Arial', size=12, bold=True, color='FFFFFF')
        self.header_fill = PatternFill(start_color='2C5F2D', end_color='2C5F2D', fill_type='solid')
        self.title_font = Font(name='Arial', size=16, bold=True, color='2C5F2D')
        self.border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

    def create_sheet(self, name):
        # Sheet titles are limited to 31 characters
        return self.workbook.create_sheet(title=name[:31])

    def add_title(self, sheet, title, width, row=1):
        last_column = get_column_letter(max(width, 1))
        sheet.merge_cells(f'A{row}:{last_column}{row}')
        cell = sheet[f'A{row}']
        cell.value = title
        cell.font = self.title_font
        cell.alignment = Alignment(horizontal='center', vertical='center')
        sheet.row_dimensions[row].height = 26

    def add_date(self, sheet, width, row=2):
        last_column = get_column_letter(max(width, 1))
        sheet.merge_cells(f'A{row}:{last_column}{row}')
        cell = sheet[f'A{row}']
        cell.value = f"Generated: {timezone.localtime().strftime('%d %B, %Y at %I:%M %p')}"
        cell.alignment = Alignment(horizontal='center')
        cell.font = Font(size=10, italic=True)

    def add_header_row(self, sheet, row, headers):
        for col_num, header in enumerate(headers, 1):
            cell = sheet.cell(row=row, column=col_num, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = self.border
        sheet.row_dimensions[row].height = 20

    def add_rows(self, sheet, start_row, rows):
        row_num = start_row
        for values in rows:
            for col_num, value in enumerate(values, 1):
                cell = sheet.cell(row=row_num, column=col_num, value=value)
                cell.border = self.border
                cell.alignment = Alignment(horizontal='left', vertical='center')
            row_num += 1
        return row_num

    def auto_adjust_columns(self, sheet):
        '''Fit column widths to their longest value, skipping merged cells'''
        for column in sheet.columns:
            max_length = 0
            column_letter = None

            for cell in column:
                if isinstance(cell, MergedCell):
                    continue
                if column_letter is None:
                    column_letter = cell.column_letter
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))

            if column_letter:
                sheet.column_dimensions[column_letter].width = min(max_length + 2, 50)

    def save(self, buffer):
        self.workbook.save(buffer)
        return buffer


class RecordListExcel(ExcelReportGenerator):
    '''One sheet listing records under a styled header row'''

    def __init__(self, title, headers, rows):
        super().__init__(title)
        self.headers = headers
        self.rows = rows

    def build(self):
        sheet = self.create_sheet(self.title)
        width = len(self.headers)

        self.add_title(sheet, self.title, width)
        self.add_date(sheet, width, row=2)

        self.add_header_row(sheet, 4, self.headers)
        self.add_rows(sheet, 5, self.rows)

        sheet.freeze_panes = 'A5'
        self.auto_adjust_columns(sheet)
        return self
