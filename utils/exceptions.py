from django.core.exceptions import PermissionDenied


class StockdeskError(Exception):
    '''Base class for errors raised by the list controller and its services'''


class AuthorizationError(PermissionDenied):
    '''The actor lacks the ability needed for the attempted action'''

    def __init__(self, ability, actor=None):
        self.ability = ability
        self.actor = actor
        super().__init__(f'Not allowed: {ability}')


class PersistenceError(StockdeskError):
    '''A storage call (database or file storage) failed'''


class BulkImportError(StockdeskError):
    '''A spreadsheet could not be imported.

    ``row_errors`` maps a spreadsheet row number to the list of messages
    collected for that row.
    '''

    def __init__(self, message, row_errors=None):
        super().__init__(message)
        self.row_errors = row_errors or {}

    @property
    def summary(self):
        if not self.row_errors:
            return str(self)
        parts = []
        for row, messages in sorted(self.row_errors.items()):
            parts.append(f"row {row}: {'; '.join(messages)}")
        return f"{self} ({', '.join(parts)})"


class InvalidTransition(StockdeskError):
    '''An operation was called in a state that does not accept it'''
