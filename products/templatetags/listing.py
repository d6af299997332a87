from dataclasses import replace
from urllib.parse import urlencode

from django import template

register = template.Library()


def _query_string(state, **overrides):
    query = state.as_query(**overrides)
    return f'?{urlencode(query)}' if query else '?'


@register.simple_tag
def list_query(filters, **overrides):
    '''Query string for ``filters`` with some parameters replaced.

    A new search text or page size goes through FilterState so the page
    resets the same way it does everywhere else.
    '''
    state = replace(filters)
    if 'search' in overrides:
        state.set_search(overrides.pop('search'))
    if 'per_page' in overrides:
        state.set_per_page(overrides.pop('per_page'))
    return _query_string(state, **overrides)


@register.simple_tag
def sort_query(filters, field_name):
    '''Query string that sorts on ``field_name`` (toggling when already sorted on it)'''
    state = replace(filters)
    state.sort_on(field_name)
    state.reset_page()
    return _query_string(state)


@register.simple_tag
def sort_indicator(filters, field_name):
    if field_name != filters.sort_by:
        return ''
    return '▲' if filters.sort_direction == 'asc' else '▼'
