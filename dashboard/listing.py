"""
Search, filter, sort and pagination for the list pages.

Each list page declares a ``ListConfig``; the request query string is read
into a ``ListState``. ``ListConfig.apply`` runs search, filters, flags, the
date filter and finally the sort, in that order.
"""
import datetime
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Set, Union

from django.conf import settings
from django.core.exceptions import FieldDoesNotExist, ValidationError
from django.core.paginator import Paginator
from django.db.models import F, Q
from django.db.models.expressions import BaseExpression

TRUTHY = {'1', 'true', 'on', 'yes'}

FilterSpec = Union[str, Callable[[list], Q]]


def lookup_target(model, lookup):
    """
    Model field the values of ``lookup`` are compared with. Relations resolve
    to the primary key of the related model.
    """
    field = None
    for name in lookup.split('__'):
        field = model._meta.get_field(name)
        if field.is_relation:
            model = field.related_model
    if field.is_relation:
        return model._meta.pk
    return field


def clean_filter_values(model, lookup, values):
    """Convert query string values for ``lookup``, dropping the ones that do not fit."""
    try:
        target = lookup_target(model, lookup)
    except FieldDoesNotExist:
        return list(values)
    cleaned = []
    for value in values:
        try:
            cleaned.append(target.to_python(value))
        except ValidationError:
            continue
    return cleaned


@dataclass
class ListState:
    search: str = ''
    sort: str = ''
    direction: str = 'asc'
    page: int = 1
    filters: Dict[str, list] = field(default_factory=dict)
    flags: Set[str] = field(default_factory=set)
    date: Optional[datetime.date] = None

    @classmethod
    def from_request(cls, request, config=None):
        params = request.GET
        state = cls(
            search=params.get('search', '').strip(),
            sort=params.get('sort', ''),
            direction='desc' if params.get('direction') == 'desc' else 'asc',
        )
        try:
            state.page = max(int(params.get('page', 1)), 1)
        except (TypeError, ValueError):
            state.page = 1

        if config is not None:
            for param in config.filters:
                values = [v for v in params.getlist(param) if v != '']
                if values:
                    state.filters[param] = values
            for param in config.flags:
                if params.get(param, '').lower() in TRUTHY:
                    state.flags.add(param)
            if config.date_field:
                try:
                    state.date = datetime.date.fromisoformat(params.get('date', ''))
                except ValueError:
                    state.date = None
        return state

    def next_sort(self, key):
        """(key, direction) a click on the ``key`` column header should request."""
        if self.sort == key:
            return key, 'desc' if self.direction == 'asc' else 'asc'
        return key, 'asc'

    @property
    def is_filtered(self):
        return bool(self.search or self.filters or self.flags or self.date)


@dataclass
class ListConfig:
    """
    search_fields: lookups ORed together with ``icontains``.
    sort_fields: sort key -> field path or expression (use ``Lower`` for text).
    filters: query param -> lookup (matched with ``__in``) or callable(values) -> Q.
    flags: query param -> callable() -> Q, applied when the param is truthy.
    date_field: lookup compared with the ``date`` param.
    """

    search_fields: Sequence[str] = ()
    sort_fields: Dict[str, Union[str, BaseExpression]] = field(default_factory=dict)
    filters: Dict[str, FilterSpec] = field(default_factory=dict)
    flags: Dict[str, Callable[[], Q]] = field(default_factory=dict)
    date_field: str = ''
    page_size: Optional[int] = None

    def search_q(self, term):
        query = Q()
        for lookup in self.search_fields:
            query |= Q(**{f'{lookup}__icontains': term})
        return query

    def apply(self, queryset, state):
        joined = False

        if state.search and self.search_fields:
            queryset = queryset.filter(self.search_q(state.search))
            joined = True

        for param, values in state.filters.items():
            spec = self.filters.get(param)
            if spec is None:
                continue
            if callable(spec):
                queryset = queryset.filter(spec(values))
            else:
                values = clean_filter_values(queryset.model, spec, values)
                if not values:
                    continue
                queryset = queryset.filter(**{f'{spec}__in': values})
            joined = True

        for param in state.flags:
            builder = self.flags.get(param)
            if builder is not None:
                queryset = queryset.filter(builder())

        if state.date and self.date_field:
            queryset = queryset.filter(**{self.date_field: state.date})

        if joined:
            queryset = queryset.distinct()

        ordering = self.sort_fields.get(state.sort)
        if ordering is not None:
            expression = F(ordering) if isinstance(ordering, str) else ordering
            if state.direction == 'desc':
                queryset = queryset.order_by(expression.desc(), 'pk')
            else:
                queryset = queryset.order_by(expression.asc(), 'pk')

        return queryset

    def paginate(self, queryset, state):
        size = self.page_size or settings.CAMPUSBOARD['PAGE_SIZE']
        return Paginator(queryset, size).get_page(state.page)


def list_context(request, queryset, config):
    """Apply ``config`` to ``queryset`` and return the template context for a list page."""
    state = ListState.from_request(request, config)
    page = config.paginate(config.apply(queryset, state), state)
    return {
        'page_obj': page,
        'object_list': page.object_list,
        'state': state,
        'total_count': page.paginator.count,
    }
