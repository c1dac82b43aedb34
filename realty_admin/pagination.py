import math

from flask import request, current_app


def get_page_params(args=None):
    """Read ``page`` and ``limit`` from the query string, clamped to sane values."""
    args = args if args is not None else request.args
    default_limit = current_app.config.get('DEFAULT_PAGE_SIZE', 20)
    max_limit = current_app.config.get('MAX_PAGE_SIZE', 100)

    try:
        page = int(args.get('page', 1))
        if page < 1:
            page = 1
    except (ValueError, TypeError):
        page = 1

    try:
        limit = int(args.get('limit', default_limit))
        if limit < 1:
            limit = 1
        if limit > max_limit:
            limit = max_limit
    except (ValueError, TypeError):
        limit = default_limit

    return page, limit


def get_sort(model, allowed_fields, args=None, default_field='created_at', default_order='desc'):
    """Return an ORDER BY clause from ``sort_by``/``sort_order``, falling back to newest first."""
    args = args if args is not None else request.args
    sort_field = (args.get('sort_by') or default_field).strip()
    sort_order = (args.get('sort_order') or default_order).strip().lower()

    if sort_field not in allowed_fields:
        sort_field = default_field
    if sort_order not in ('asc', 'desc'):
        sort_order = default_order

    column = getattr(model, sort_field)
    return column.asc() if sort_order == 'asc' else column.desc()


def pagination_info(page, limit, total):
    return {
        "page": page,
        "pages": math.ceil(total / limit) if limit else 0,
        "total": total,
        "limit": limit,
    }


def paginate(query, page, limit):
    """Run ``query`` for one page. Returns (items, pagination dict)."""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, pagination_info(page, limit, total)
