import io

from .excel_generator import RecordListExcel
from .pdf_generator import RecordListPDF

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
PDF_CONTENT_TYPE = 'application/pdf'


class Column:
    def __init__(self, header, accessor):
        self.header = header
        self.accessor = accessor

    def value(self, record):
        if callable(self.accessor):
            value = self.accessor(record)
        else:
            value = record
            for part in self.accessor.split('.'):
                value = getattr(value, part, None) if value is not None else None
        return '' if value is None else value


class ListExporter:
    '''Renders a list of records as an .xlsx workbook or a PDF table'''

    def __init__(self, title, columns):
        self.title = title
        self.columns = columns

    @property
    def headers(self):
        return [column.header for column in self.columns]

    def rows(self, records):
        return [[column.value(record) for column in self.columns] for record in records]

    def to_spreadsheet(self, records):
        buffer = io.BytesIO()
        RecordListExcel(self.title, self.headers, self.rows(records)).build().save(buffer)
        return buffer.getvalue()

    def to_pdf(self, records):
        buffer = io.BytesIO()
        RecordListPDF(self.title, self.headers, self.rows(records)).build().generate(buffer)
        return buffer.getvalue()
