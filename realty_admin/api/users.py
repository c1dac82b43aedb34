import io
from datetime import datetime

from flask import Blueprint, request, jsonify, current_app, g, send_file
from openpyxl import Workbook
from openpyxl.styles import Font
from sqlalchemy import func
from werkzeug.security import generate_password_hash

from realty_admin.auth import require_admin, admin_only, has_permission
from realty_admin.api.helpers import get_or_404
from realty_admin.errors import Conflict
from realty_admin.extensions import db
from realty_admin.filters import FilterBuilder
from realty_admin.models.user import User
from realty_admin.pagination import get_page_params, get_sort, paginate
from realty_admin.schemas.user_schema import (
    UserSchema,
    UserStatusSchema,
    UserBlockSchema,
    BulkDeleteSchema,
    USER_STATUSES,
    USER_TYPES,
)
from realty_admin.services.notifications import queue_template_email

bp = Blueprint('users', __name__)

user_schema = UserSchema()
user_status_schema = UserStatusSchema()
user_block_schema = UserBlockSchema()
bulk_delete_schema = BulkDeleteSchema()

USER_SORT_FIELDS = {'created_at', 'name', 'email', 'last_login', 'status', 'user_type'}

EXPORT_COLUMNS = [
    ('Name', 'name'),
    ('Email', 'email'),
    ('Phone', 'phone'),
    ('User Type', 'user_type'),
    ('Status', 'status'),
    ('Blocked', 'is_blocked'),
    ('Verified', 'is_verified'),
    ('Last Login', 'last_login'),
    ('Created At', 'created_at'),
]


@bp.before_request
def require_admin_account():
    require_admin()


def _user_filters(args):
    return (
        FilterBuilder()
        .search(args.get('search'), User.name, User.email, User.phone)
        .equals(User.status, args.get('status'), allowed=USER_STATUSES)
        .equals(User.user_type, args.get('user_type'), allowed=USER_TYPES)
        .flag(User.is_blocked, args.get('is_blocked'))
    )


def _ensure_unique(email=None, phone=None, exclude_id=None):
    if email:
        query = User.query.filter(User.email == email)
        if exclude_id:
            query = query.filter(User.user_id != exclude_id)
        if query.first():
            raise Conflict('User with this email already exists')
    if phone:
        query = User.query.filter(User.phone == phone)
        if exclude_id:
            query = query.filter(User.user_id != exclude_id)
        if query.first():
            raise Conflict('User with this phone number already exists')


@bp.route('', methods=['GET'])
@admin_only
def list_users():
    """
    List end users with filtering, search, pagination and sorting.

    Query Parameters:
        - page, limit (max 100)
        - search: name, email or phone (case-insensitive, partial match)
        - status: active | inactive | pending
        - user_type: tenant | landlord | both
        - is_blocked: true | false
        - sort_by / sort_order
    """
    page, limit = get_page_params()
    query = _user_filters(request.args).apply(User.query)
    query = query.order_by(get_sort(User, USER_SORT_FIELDS))
    users, pagination = paginate(query, page, limit)

    current_app.logger.debug(f"List users: page={page} limit={limit} total={pagination['total']}")

    return jsonify({
        "success": True,
        "data": [user.to_dict() for user in users],
        "pagination": pagination
    }), 200


@bp.route('/stats', methods=['GET'])
@admin_only
def user_stats():
    now = datetime.utcnow()
    month_start = datetime(now.year, now.month, 1)
    if now.month == 1:
        previous_month_start = datetime(now.year - 1, 12, 1)
    else:
        previous_month_start = datetime(now.year, now.month - 1, 1)

    total = User.query.count()
    new_this_month = User.query.filter(User.created_at >= month_start).count()
    new_last_month = User.query.filter(
        User.created_at >= previous_month_start,
        User.created_at < month_start
    ).count()

    if new_last_month:
        growth_rate = round((new_this_month - new_last_month) / new_last_month * 100, 2)
    else:
        growth_rate = 100.0 if new_this_month else 0.0

    by_type = dict(
        db.session.query(User.user_type, func.count(User.user_id)).group_by(User.user_type).all()
    )

    return jsonify({
        "success": True,
        "data": {
            "total": total,
            "active": User.query.filter_by(status='active').count(),
            "inactive": User.query.filter_by(status='inactive').count(),
            "pending": User.query.filter_by(status='pending').count(),
            "blocked": User.query.filter_by(is_blocked=True).count(),
            "verified": User.query.filter_by(is_verified=True).count(),
            "by_type": {user_type: by_type.get(user_type, 0) for user_type in USER_TYPES},
            "new_this_month": new_this_month,
            "growth_rate": growth_rate,
        }
    }), 200


@bp.route('/export', methods=['GET'])
@admin_only
def export_users():
    """Download the filtered user list as an Excel workbook."""
    query = _user_filters(request.args).apply(User.query).order_by(User.created_at.desc())

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = 'Users'
    sheet.append([header for header, _ in EXPORT_COLUMNS])
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    count = 0
    for user in query.yield_per(500):
        row = []
        for _, attribute in EXPORT_COLUMNS:
            value = getattr(user, attribute)
            if isinstance(value, bool):
                value = 'Yes' if value else 'No'
            row.append(value)
        sheet.append(row)
        count += 1

    output = io.BytesIO()
    workbook.save(output)
    output.seek(0)

    current_app.logger.info(f"Exported {count} users for admin {g.principal.id}")

    return send_file(
        output,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name=f"users-{datetime.utcnow().strftime('%Y%m%d%H%M%S')}.xlsx"
    )


@bp.route('/<user_id>', methods=['GET'])
@admin_only
def get_user(user_id):
    user = get_or_404(User, user_id, 'User not found')
    return jsonify({"success": True, "data": user.to_dict()}), 200


@bp.route('', methods=['POST'])
@has_permission('users', 'create')
def create_user():
    data = user_schema.load(request.get_json(silent=True) or {})
    _ensure_unique(email=data['email'], phone=data['phone'])

    password = data.pop('password')
    user = User(**data)
    user.password_hash = generate_password_hash(password)
    user.created_by = g.principal.id

    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"User {user.user_id} created by admin {g.principal.id}")

    queue_template_email('welcome', user.email, {"name": user.name, "email": user.email})

    return jsonify({
        "success": True,
        "message": "User created successfully",
        "data": user.to_dict()
    }), 201


@bp.route('/<user_id>', methods=['PUT'])
@has_permission('users', 'update')
def update_user(user_id):
    user = get_or_404(User, user_id, 'User not found')
    data = user_schema.load(request.get_json(silent=True) or {}, partial=True)

    _ensure_unique(
        email=data.get('email') if data.get('email') != user.email else None,
        phone=data.get('phone') if data.get('phone') != user.phone else None,
        exclude_id=user.user_id,
    )

    password = data.pop('password', None)
    for field, value in data.items():
        setattr(user, field, value)
    if password:
        user.password_hash = generate_password_hash(password)

    db.session.commit()

    return jsonify({
        "success": True,
        "message": "User updated successfully",
        "data": user.to_dict()
    }), 200


@bp.route('/<user_id>/status', methods=['PATCH'])
@has_permission('users', 'update')
def update_user_status(user_id):
    user = get_or_404(User, user_id, 'User not found')
    data = user_status_schema.load(request.get_json(silent=True) or {})

    user.status = data['status']
    db.session.commit()

    return jsonify({
        "success": True,
        "message": f"User status updated to {user.status}",
        "data": user.to_dict()
    }), 200


@bp.route('/<user_id>/block', methods=['PATCH'])
@has_permission('users', 'update')
def toggle_user_block(user_id):
    user = get_or_404(User, user_id, 'User not found')
    data = user_block_schema.load(request.get_json(silent=True) or {})

    user.is_blocked = data['is_blocked']
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "User blocked successfully" if user.is_blocked else "User unblocked successfully",
        "data": user.to_dict()
    }), 200


@bp.route('/<user_id>', methods=['DELETE'])
@has_permission('users', 'delete')
def delete_user(user_id):
    user = get_or_404(User, user_id, 'User not found')
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info(f"User {user_id} deleted by admin {g.principal.id}")

    return jsonify({"success": True, "message": "User deleted successfully"}), 200


@bp.route('/bulk-delete', methods=['POST'])
@has_permission('users', 'delete')
def bulk_delete_users():
    data = bulk_delete_schema.load(request.get_json(silent=True) or {})

    users = User.query.filter(User.user_id.in_(data['user_ids'])).all()
    for user in users:
        db.session.delete(user)
    db.session.commit()

    current_app.logger.info(f"Bulk delete: {len(users)} users removed by admin {g.principal.id}")

    return jsonify({
        "success": True,
        "message": f"{len(users)} users deleted successfully",
        "data": {"deleted_count": len(users)}
    }), 200


@bp.route('/<user_id>/logins', methods=['GET'])
@admin_only
def user_login_history(user_id):
    """Only the most recent login is tracked per account."""
    user = get_or_404(User, user_id, 'User not found')
    history = []
    if user.last_login:
        history.append({"logged_in_at": user.last_login.isoformat()})

    return jsonify({
        "success": True,
        "data": {
            "user_id": user.user_id,
            "last_login": user.last_login.isoformat() if user.last_login else None,
            "history": history,
        }
    }), 200
