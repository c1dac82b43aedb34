"""
Typed filter builder for list endpoints.

Each list handler describes its optional query parameters through a
``FilterBuilder``; parameters that were not supplied add nothing. The
resulting predicate list is applied in one go:

    filters = (FilterBuilder()
               .search(args.get('search'), User.name, User.email)
               .equals(User.status, args.get('status'))
               .flag(User.is_blocked, args.get('is_blocked')))
    query = filters.apply(User.query)
"""
from datetime import datetime, time

from sqlalchemy import and_, or_

from realty_admin.utils import parse_bool


def _parse_date(value, end_of_day=False):
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None
    if end_of_day and len(str(value).strip()) <= 10:
        parsed = datetime.combine(parsed.date(), time.max)
    return parsed


def _parse_number(value):
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _contains_pattern(value):
    """LIKE pattern matching ``value`` literally anywhere in the column."""
    escaped = value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f'%{escaped}%'


class FilterBuilder:

    def __init__(self):
        self.predicates = []

    def add(self, predicate):
        if predicate is not None:
            self.predicates.append(predicate)
        return self

    def search(self, term, *columns):
        """Case-insensitive substring match across ``columns``."""
        term = (term or '').strip()
        if term and columns:
            pattern = _contains_pattern(term)
            self.predicates.append(or_(*[column.ilike(pattern, escape='\\') for column in columns]))
        return self

    def equals(self, column, value, allowed=None):
        if value is None or value == '':
            return self
        if allowed is not None and value not in allowed:
            return self
        self.predicates.append(column == value)
        return self

    def one_of(self, column, values):
        values = [v for v in (values or []) if v not in (None, '')]
        if values:
            self.predicates.append(column.in_(values))
        return self

    def contains(self, column, value):
        value = (value or '').strip()
        if value:
            self.predicates.append(column.ilike(_contains_pattern(value), escape='\\'))
        return self

    def flag(self, column, raw):
        value = parse_bool(raw)
        if value is not None:
            self.predicates.append(column.is_(value))
        return self

    def number_range(self, column, minimum=None, maximum=None):
        minimum, maximum = _parse_number(minimum), _parse_number(maximum)
        if minimum is not None:
            self.predicates.append(column >= minimum)
        if maximum is not None:
            self.predicates.append(column <= maximum)
        return self

    def date_range(self, column, start=None, end=None):
        start, end = _parse_date(start), _parse_date(end, end_of_day=True)
        if start is not None:
            self.predicates.append(column >= start)
        if end is not None:
            self.predicates.append(column <= end)
        return self

    def price_range(self, columns, minimum=None, maximum=None):
        """Match when any of ``columns`` falls inside the range."""
        minimum, maximum = _parse_number(minimum), _parse_number(maximum)
        if minimum is None and maximum is None:
            return self
        per_column = []
        for column in columns:
            bounds = []
            if minimum is not None:
                bounds.append(column >= minimum)
            if maximum is not None:
                bounds.append(column <= maximum)
            per_column.append(and_(*bounds))
        self.predicates.append(or_(*per_column))
        return self

    def apply(self, query):
        if self.predicates:
            query = query.filter(*self.predicates)
        return query
