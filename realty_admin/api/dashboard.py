from datetime import datetime

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy import func, extract

from realty_admin.auth import require_admin
from realty_admin.extensions import db
from realty_admin.models.admin import Admin
from realty_admin.models.payment import Payment
from realty_admin.models.property import Property, PROPERTY_STATUSES
from realty_admin.models.user import User

bp = Blueprint('dashboard', __name__)

TREND_MONTHS = 6


@bp.before_request
def require_admin_account():
    require_admin()


def _months_back(count):
    """First day of the month ``count - 1`` months before the current one."""
    now = datetime.utcnow()
    year, month = now.year, now.month - (count - 1)
    while month < 1:
        month += 12
        year -= 1
    return datetime(year, month, 1)


def _month_series(rows, count):
    """Fill a {(year, month): value} mapping into a continuous month list."""
    start = _months_back(count)
    series = []
    year, month = start.year, start.month
    for _ in range(count):
        series.append({
            "year": year,
            "month": month,
            "label": datetime(year, month, 1).strftime('%b %Y'),
            "value": rows.get((year, month), 0),
        })
        month += 1
        if month > 12:
            month, year = 1, year + 1
    return series


def _metric(value):
    return jsonify({"success": True, "data": {"value": value}}), 200


def total_properties():
    return Property.query.count()


def active_listings():
    return Property.query.filter_by(status='published').count()


def active_leases():
    return Property.query.filter_by(status='rented', listing_type='rent').count()


def tenant_count():
    return User.query.filter(User.user_type.in_(('tenant', 'both'))).count()


def landlord_count():
    return User.query.filter(User.user_type.in_(('landlord', 'both'))).count()


def revenue_total():
    total = db.session.query(func.coalesce(func.sum(Payment.amount), 0)).filter(Payment.status == 'completed').scalar()
    return float(total or 0)


def admin_count():
    return Admin.query.filter_by(status='active').count()


@bp.route('/metrics/total-properties', methods=['GET'])
def metric_total_properties():
    return _metric(total_properties())


@bp.route('/metrics/active-listings', methods=['GET'])
def metric_active_listings():
    return _metric(active_listings())


@bp.route('/metrics/active-leases', methods=['GET'])
def metric_active_leases():
    return _metric(active_leases())


@bp.route('/metrics/tenant-count', methods=['GET'])
def metric_tenant_count():
    return _metric(tenant_count())


@bp.route('/metrics/landlord-count', methods=['GET'])
def metric_landlord_count():
    return _metric(landlord_count())


@bp.route('/metrics/revenue', methods=['GET'])
def metric_revenue():
    return _metric(revenue_total())


@bp.route('/metrics/admin-count', methods=['GET'])
def metric_admin_count():
    return _metric(admin_count())


@bp.route('/overview', methods=['GET'])
def overview():
    """All headline metrics in one payload."""
    data = {
        "total_properties": total_properties(),
        "active_listings": active_listings(),
        "active_leases": active_leases(),
        "tenant_count": tenant_count(),
        "landlord_count": landlord_count(),
        "revenue": revenue_total(),
        "admin_count": admin_count(),
    }
    current_app.logger.debug("Dashboard overview: %s", data)
    return jsonify({"success": True, "data": data}), 200


@bp.route('/charts/property-status', methods=['GET'])
def chart_property_status():
    counts = dict(
        db.session.query(Property.status, func.count(Property.property_id)).group_by(Property.status).all()
    )
    return jsonify({
        "success": True,
        "data": [{"status": status, "count": counts.get(status, 0)} for status in PROPERTY_STATUSES]
    }), 200


@bp.route('/charts/revenue-trend', methods=['GET'])
def chart_revenue_trend():
    year_col = extract('year', Payment.created_at)
    month_col = extract('month', Payment.created_at)
    rows = (
        db.session.query(year_col, month_col, func.sum(Payment.amount))
        .filter(Payment.status == 'completed', Payment.created_at >= _months_back(TREND_MONTHS))
        .group_by(year_col, month_col)
        .all()
    )
    totals = {(int(year), int(month)): float(total or 0) for year, month, total in rows}
    return jsonify({"success": True, "data": _month_series(totals, TREND_MONTHS)}), 200


@bp.route('/charts/user-growth', methods=['GET'])
def chart_user_growth():
    year_col = extract('year', User.created_at)
    month_col = extract('month', User.created_at)
    rows = (
        db.session.query(year_col, month_col, func.count(User.user_id))
        .filter(User.created_at >= _months_back(TREND_MONTHS))
        .group_by(year_col, month_col)
        .all()
    )
    counts = {(int(year), int(month)): count for year, month, count in rows}
    return jsonify({"success": True, "data": _month_series(counts, TREND_MONTHS)}), 200


@bp.route('/charts/lease-status', methods=['GET'])
def chart_lease_status():
    rented = active_leases()
    available = Property.query.filter(
        Property.status == 'published',
        Property.listing_type.in_(('rent', 'both'))
    ).count()
    return jsonify({
        "success": True,
        "data": [
            {"status": "leased", "count": rented},
            {"status": "available", "count": available},
        ]
    }), 200


def _recent_limit():
    try:
        limit = int(request.args.get('limit', 5))
    except (TypeError, ValueError):
        limit = 5
    return max(1, min(limit, 50))


@bp.route('/recent/properties', methods=['GET'])
def recent_properties():
    properties = Property.query.order_by(Property.created_at.desc()).limit(_recent_limit()).all()
    return jsonify({"success": True, "data": [p.to_summary() for p in properties]}), 200


@bp.route('/recent/users', methods=['GET'])
def recent_users():
    users = User.query.order_by(User.created_at.desc()).limit(_recent_limit()).all()
    return jsonify({"success": True, "data": [u.to_dict() for u in users]}), 200


@bp.route('/recent/activities', methods=['GET'])
def recent_activities():
    """Latest listings, sign-ups and payments merged into one timeline."""
    limit = _recent_limit()
    activities = []

    for prop in Property.query.order_by(Property.created_at.desc()).limit(limit).all():
        activities.append({
            "type": "property",
            "message": f"New property listed: {prop.title}",
            "reference_id": prop.property_id,
            "timestamp": prop.created_at,
        })
    for user in User.query.order_by(User.created_at.desc()).limit(limit).all():
        activities.append({
            "type": "user",
            "message": f"New {user.user_type} registered: {user.name}",
            "reference_id": user.user_id,
            "timestamp": user.created_at,
        })
    for payment in Payment.query.order_by(Payment.created_at.desc()).limit(limit).all():
        activities.append({
            "type": "payment",
            "message": f"Payment {payment.payment_id} {payment.status}: {payment.currency} {payment.amount}",
            "reference_id": payment.payment_id,
            "timestamp": payment.created_at,
        })

    activities.sort(key=lambda item: item['timestamp'] or datetime.min, reverse=True)
    for item in activities:
        item['timestamp'] = item['timestamp'].isoformat() if item['timestamp'] else None

    return jsonify({"success": True, "data": activities[:limit]}), 200
