import logging
import zipfile

from django.db import DatabaseError, transaction
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .exceptions import BulkImportError

logger = logging.getLogger(__name__)


def normalize_header(value):
    if value is None:
        return ''
    return str(value).strip().lower().replace(' ', '_')


class SpreadsheetImporter:
    '''Creates records from the first sheet of an .xlsx workbook.

    The first non-empty row holds the column names. Every data row is
    validated through ``form_class``; rows are only written when all of
    them are valid, inside one transaction.
    '''

    def __init__(self, form_class, aliases=None, resolvers=None, defaults=None):
        self.form_class = form_class
        self.aliases = aliases or {}
        self.resolvers = resolvers or {}
        self.defaults = defaults or {}

    def field_for(self, header):
        header = normalize_header(header)
        return self.aliases.get(header, header)

    def read_rows(self, upload):
        try:
            workbook = load_workbook(upload, read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
            raise BulkImportError('Unable to read the uploaded file. Please upload a valid .xlsx file.') from exc

        try:
            sheet = workbook.active
            fields = None
            for row in sheet.iter_rows(values_only=True):
                if not any(value not in (None, '') for value in row):
                    continue
                if fields is None:
                    fields = [self.field_for(value) for value in row]
                    continue
                yield dict(zip(fields, row))
            if fields is None:
                raise BulkImportError('The uploaded file is empty or missing a header row.')
        finally:
            workbook.close()

    def row_data(self, row):
        data = dict(self.defaults)
        for name, value in row.items():
            if not name:
                continue
            if value in (None, '') and name in self.defaults:
                continue
            if name in self.resolvers:
                value = self.resolvers[name](value)
            data[name] = '' if value is None else value
        return data

    def import_from(self, upload):
        '''Return the number of records created or raise BulkImportError'''
        forms = []
        row_errors = {}
        # Row 1 is the header
        for number, row in enumerate(self.read_rows(upload), start=2):
            form = self.form_class(data=self.row_data(row))
            if form.is_valid():
                forms.append(form)
            else:
                row_errors[number] = [
                    f'{field}: {message}'
                    for field, messages in form.errors.items()
                    for message in messages
                ]

        if row_errors:
            raise BulkImportError(f'{len(row_errors)} row(s) failed validation', row_errors)
        if not forms:
            raise BulkImportError('The uploaded file contains no rows to import.')

        try:
            with transaction.atomic():
                for form in forms:
                    form.save()
        except DatabaseError as exc:
            logger.error('Spreadsheet import failed while saving: %s', exc, exc_info=True)
            raise BulkImportError('Unable to save the imported rows.') from exc

        logger.info('Imported %s %s record(s)', len(forms), self.form_class._meta.model.__name__)
        return len(forms)
