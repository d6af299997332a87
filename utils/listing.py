import logging
from dataclasses import dataclass, field
from functools import reduce
from operator import or_

from django.conf import settings
from django.core.paginator import Paginator
from django.db.models import Q

logger = logging.getLogger(__name__)

ASC = 'asc'
DESC = 'desc'
DEFAULT_SORT = 'id'
DEFAULT_DIRECTION = DESC


def pagination_options():
    return list(getattr(settings, 'PAGINATION_OPTIONS', [10, 25, 50, 100]))


def default_page_size():
    return getattr(settings, 'PAGINATION_DEFAULT', 100)


def _positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


@dataclass
class FilterState:
    '''Search, sort and pagination parameters of a list view'''

    search: str = ''
    sort_by: str = DEFAULT_SORT
    sort_direction: str = DEFAULT_DIRECTION
    per_page: int = field(default_factory=default_page_size)
    page: int = 1

    @classmethod
    def from_query(cls, params):
        '''Read the state from a GET QueryDict (or any mapping)'''
        direction = params.get('direction', DEFAULT_DIRECTION)
        return cls(
            search=(params.get('search') or '').strip(),
            sort_by=params.get('sort') or DEFAULT_SORT,
            sort_direction=direction if direction in (ASC, DESC) else DEFAULT_DIRECTION,
            per_page=_positive_int(params.get('per_page'), default_page_size()),
            page=_positive_int(params.get('page'), 1),
        )

    def set_search(self, text):
        text = (text or '').strip()
        if text != self.search:
            self.search = text
            self.page = 1

    def set_per_page(self, size):
        size = _positive_int(size, default_page_size())
        if size != self.per_page:
            self.per_page = size
            self.page = 1

    def sort_on(self, field_name):
        # Same column flips the direction, a new column starts ascending
        if field_name == self.sort_by:
            self.sort_direction = ASC if self.sort_direction == DESC else DESC
        else:
            self.sort_by = field_name
            self.sort_direction = ASC

    def go_to(self, page):
        self.page = _positive_int(page, 1)

    def reset_page(self):
        self.page = 1

    def as_query(self, **overrides):
        '''Query-string parameters, leaving out values equal to the defaults'''
        state = {
            'search': self.search,
            'sort': self.sort_by,
            'direction': self.sort_direction,
            'per_page': self.per_page,
            'page': self.page,
        }
        state.update(overrides)
        defaults = {
            'search': '',
            'sort': DEFAULT_SORT,
            'direction': DEFAULT_DIRECTION,
            'per_page': default_page_size(),
            'page': 1,
        }
        return {key: value for key, value in state.items() if value != defaults[key]}


class ListQueryBuilder:
    '''Turns a FilterState into an ordered, paginated queryset'''

    def __init__(self, queryset, searchable=(), orderable=(), related=()):
        self.queryset = queryset
        self.searchable = tuple(searchable)
        self.orderable = tuple(orderable)
        self.related = tuple(related)

    def ordering(self, filters):
        sort_by = filters.sort_by
        direction = filters.sort_direction
        if sort_by not in self.orderable:
            if sort_by != DEFAULT_SORT:
                logger.debug('Ignoring sort on non-orderable field %r', sort_by)
            sort_by, direction = DEFAULT_SORT, DEFAULT_DIRECTION
        elif direction not in (ASC, DESC):
            direction = DEFAULT_DIRECTION

        ordering = [f"{'-' if direction == DESC else ''}{sort_by}"]
        if sort_by != 'id':
            ordering.append('id')
        return ordering

    def build(self, filters):
        records = self.queryset.all()
        if self.related:
            records = records.select_related(*self.related)

        if filters.search and self.searchable:
            records = records.filter(
                reduce(or_, (Q(**{f'{name}__icontains': filters.search}) for name in self.searchable))
            )

        return records.order_by(*self.ordering(filters))

    def page_size(self, filters):
        options = pagination_options()
        if filters.per_page in options:
            return filters.per_page
        return default_page_size()

    def build_page(self, filters):
        paginator = Paginator(self.build(filters), self.page_size(filters))
        return paginator.get_page(filters.page)


class SelectionTracker:
    '''Record ids checked for a bulk action'''

    def __init__(self, ids=()):
        self._ids = set(ids)

    @classmethod
    def from_session(cls, session, key):
        return cls(session.get(key, []))

    def save(self, session, key):
        session[key] = sorted(self._ids)

    def toggle(self, record_id):
        if record_id in self._ids:
            self._ids.discard(record_id)
        else:
            self._ids.add(record_id)

    def clear(self):
        self._ids.clear()

    def count(self):
        return len(self._ids)

    def selected_ids(self):
        return set(self._ids)

    def __contains__(self, record_id):
        return record_id in self._ids

    def __len__(self):
        return len(self._ids)
