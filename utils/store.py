import logging
from dataclasses import dataclass, field

from django.db import DatabaseError, transaction
from django.db.models import ProtectedError, RestrictedError
from django.shortcuts import get_object_or_404

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)


@dataclass
class DeleteResult:
    deleted: set = field(default_factory=set)
    missing: set = field(default_factory=set)

    @property
    def count(self):
        return len(self.deleted)


class ModelStore:
    '''Reads and writes one model's records through the ORM'''

    def __init__(self, model, builder):
        self.model = model
        self.builder = builder

    def find(self, pk):
        return get_object_or_404(self.builder.queryset, pk=pk)

    def query(self, filters):
        return self.builder.build_page(filters)

    def all(self, filters):
        '''Every record matching the filters, ignoring pagination'''
        return self.builder.build(filters)

    def insert(self, record):
        if record.pk is not None:
            raise ValueError(f'{self.model.__name__} {record.pk} is already stored')
        return self._save(record, 'insert')

    def update(self, record):
        if record.pk is None:
            raise ValueError(f'Cannot update an unsaved {self.model.__name__}')
        return self._save(record, 'update')

    def _save(self, record, action):
        try:
            with transaction.atomic():
                record.save()
        except DatabaseError as exc:
            logger.error('Failed to %s %s: %s', action, self.model.__name__, exc, exc_info=True)
            raise PersistenceError(f'Unable to save {self.model._meta.verbose_name}.') from exc
        logger.info('%s %s %s', self.model.__name__, record.pk, 'created' if action == 'insert' else 'updated')
        return record

    def delete_many(self, ids):
        '''Delete every existing record in ``ids`` in one transaction.

        Ids with no matching record are reported in ``missing``; a failure
        rolls the whole delete back.
        '''
        ids = set(ids)
        if not ids:
            return DeleteResult()

        try:
            with transaction.atomic():
                records = self.model.objects.filter(pk__in=ids)
                found = set(records.values_list('pk', flat=True))
                records.delete()
        except (ProtectedError, RestrictedError, DatabaseError) as exc:
            logger.error('Failed to delete %s %s: %s', self.model.__name__, sorted(ids), exc)
            raise PersistenceError(f'Unable to delete {self.model._meta.verbose_name_plural}.') from exc

        result = DeleteResult(deleted=found, missing=ids - found)
        logger.info(
            'Deleted %s %s (missing: %s)',
            self.model.__name__, sorted(result.deleted), sorted(result.missing),
        )
        return result
