from datetime import datetime

from flask import Blueprint, request, jsonify, current_app, g
from sqlalchemy import func

from realty_admin.auth import require_admin, admin_only, has_permission
from realty_admin.api.helpers import get_payload, get_or_404
from realty_admin.errors import Conflict, ValidationFailed
from realty_admin.extensions import db
from realty_admin.filters import FilterBuilder
from realty_admin.models.performance_log import PerformanceLog
from realty_admin.models.property import Property
from realty_admin.models.role import Role
from realty_admin.models.staff import Staff
from realty_admin.models.task import Task, TASK_STATUSES, TASK_PRIORITIES, TASK_TYPES, OPEN_TASK_STATUSES
from realty_admin.pagination import get_page_params, get_sort, paginate
from realty_admin.schemas.staff_schema import (
    StaffSchema,
    StaffStatusSchema,
    AssignRoleSchema,
    TaskSchema,
    TaskStatusSchema,
    PerformanceLogSchema,
    STAFF_STATUSES,
)
from realty_admin.uploads import save_uploads, remove_files, remove_path, path_for_url, IMAGES

bp = Blueprint('staff', __name__)

staff_schema = StaffSchema()
staff_status_schema = StaffStatusSchema()
assign_role_schema = AssignRoleSchema()
task_schema = TaskSchema()
task_status_schema = TaskStatusSchema()
performance_log_schema = PerformanceLogSchema()

STAFF_SORT_FIELDS = {'created_at', 'name', 'email', 'hire_date', 'salary', 'status'}
TASK_SORT_FIELDS = {'created_at', 'due_date', 'priority', 'status'}


@bp.before_request
def require_admin_account():
    require_admin()


def _ensure_role(role_id):
    if not db.session.get(Role, role_id):
        raise ValidationFailed('Invalid role ID', errors=[
            {"field": "role_id", "message": "Invalid role ID", "value": role_id}
        ])


def _ensure_unique(email=None, phone=None, exclude_id=None):
    if email:
        query = Staff.query.filter(Staff.email == email)
        if exclude_id:
            query = query.filter(Staff.staff_id != exclude_id)
        if query.first():
            raise Conflict('Staff member with this email already exists')
    if phone:
        query = Staff.query.filter(Staff.phone == phone)
        if exclude_id:
            query = query.filter(Staff.staff_id != exclude_id)
        if query.first():
            raise Conflict('Staff member with this phone number already exists')


# ---------------------------------------------------------------------------
# Staff members
# ---------------------------------------------------------------------------

@bp.route('', methods=['GET'])
@admin_only
def list_staff():
    """
    List staff members.

    Query Parameters:
        - page, limit
        - search: name or email
        - status: active | inactive | suspended
        - role_id
        - sort_by / sort_order
    """
    page, limit = get_page_params()
    filters = (
        FilterBuilder()
        .search(request.args.get('search'), Staff.name, Staff.email)
        .equals(Staff.status, request.args.get('status'), allowed=STAFF_STATUSES)
        .equals(Staff.role_id, request.args.get('role_id'))
    )
    query = filters.apply(Staff.query).order_by(get_sort(Staff, STAFF_SORT_FIELDS))
    members, pagination = paginate(query, page, limit)

    return jsonify({
        "success": True,
        "data": [member.to_dict() for member in members],
        "pagination": pagination
    }), 200


@bp.route('/stats', methods=['GET'])
@admin_only
def staff_stats():
    by_status = dict(
        db.session.query(Staff.status, func.count(Staff.staff_id)).group_by(Staff.status).all()
    )
    by_role = (
        db.session.query(Role.role_id, Role.name, func.count(Staff.staff_id))
        .join(Staff, Staff.role_id == Role.role_id)
        .group_by(Role.role_id, Role.name)
        .all()
    )

    return jsonify({
        "success": True,
        "data": {
            "total": Staff.query.count(),
            "by_status": {status: by_status.get(status, 0) for status in STAFF_STATUSES},
            "by_role": [{"role_id": role_id, "role": name, "count": count} for role_id, name, count in by_role],
            "open_tasks": Task.query.filter(Task.status.in_(OPEN_TASK_STATUSES)).count(),
        }
    }), 200


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

@bp.route('/tasks/all', methods=['GET'])
@admin_only
def list_tasks():
    page, limit = get_page_params()
    filters = (
        FilterBuilder()
        .search(request.args.get('search'), Task.title, Task.description)
        .equals(Task.status, request.args.get('status'), allowed=TASK_STATUSES)
        .equals(Task.priority, request.args.get('priority'), allowed=TASK_PRIORITIES)
        .equals(Task.task_type, request.args.get('task_type'), allowed=TASK_TYPES)
        .equals(Task.staff_id, request.args.get('staff_id'))
        .date_range(Task.due_date, request.args.get('due_from'), request.args.get('due_to'))
    )
    query = filters.apply(Task.query).order_by(get_sort(Task, TASK_SORT_FIELDS))
    tasks, pagination = paginate(query, page, limit)

    return jsonify({
        "success": True,
        "data": [task.to_dict() for task in tasks],
        "pagination": pagination
    }), 200


@bp.route('/tasks', methods=['POST'])
@has_permission('staff', 'create')
def create_task():
    data = task_schema.load(request.get_json(silent=True) or {})

    get_or_404(Staff, data['staff_id'], 'Staff member not found')
    if data.get('property_id'):
        get_or_404(Property, data['property_id'], 'Property not found')

    task = Task(**data)
    task.created_by = g.principal.id
    db.session.add(task)
    db.session.commit()

    current_app.logger.info(f"Task {task.task_id} assigned to staff {task.staff_id}")

    return jsonify({
        "success": True,
        "message": "Task created successfully",
        "data": task.to_dict()
    }), 201


@bp.route('/tasks/<task_id>/status', methods=['PATCH'])
@has_permission('staff', 'update')
def update_task_status(task_id):
    task = get_or_404(Task, task_id, 'Task not found')
    data = task_status_schema.load(request.get_json(silent=True) or {})

    task.status = data['status']
    if data['status'] == 'completed':
        task.completed_at = datetime.utcnow()
    if data.get('notes') is not None:
        task.notes = data['notes']
    db.session.commit()

    return jsonify({
        "success": True,
        "message": f"Task status updated to {task.status}",
        "data": task.to_dict()
    }), 200


# ---------------------------------------------------------------------------
# Performance
# ---------------------------------------------------------------------------

@bp.route('/performance-log', methods=['POST'])
@has_permission('staff', 'create')
def create_performance_log():
    data = performance_log_schema.load(request.get_json(silent=True) or {})

    get_or_404(Staff, data['staff_id'], 'Staff member not found')
    if data.get('task_id'):
        get_or_404(Task, data['task_id'], 'Task not found')

    log = PerformanceLog(**{k: v for k, v in data.items() if v is not None})
    log.logged_by = g.principal.id
    db.session.add(log)
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Performance logged successfully",
        "data": log.to_dict()
    }), 201


@bp.route('/<staff_id>/performance', methods=['GET'])
@admin_only
def staff_performance(staff_id):
    """
    Performance logs for one staff member.

    Query Parameters:
        - date_from / date_to: limit the logs by performance_date
    """
    member = get_or_404(Staff, staff_id, 'Staff member not found')

    logs_query = FilterBuilder().equals(PerformanceLog.staff_id, staff_id).date_range(
        PerformanceLog.performance_date, request.args.get('date_from'), request.args.get('date_to')
    ).apply(PerformanceLog.query)
    logs = logs_query.order_by(PerformanceLog.performance_date.desc()).all()

    average = round(sum(log.score for log in logs) / len(logs), 2) if logs else 0

    task_counts = dict(
        db.session.query(Task.status, func.count(Task.task_id))
        .filter(Task.staff_id == staff_id)
        .group_by(Task.status)
        .all()
    )

    return jsonify({
        "success": True,
        "data": {
            "staff": member.to_dict(),
            "logs": [log.to_dict() for log in logs],
            "average_score": average,
            "task_stats": {status: task_counts.get(status, 0) for status in TASK_STATUSES},
        }
    }), 200


# ---------------------------------------------------------------------------
# Single staff member
# ---------------------------------------------------------------------------

@bp.route('/<staff_id>', methods=['GET'])
@admin_only
def get_staff(staff_id):
    member = get_or_404(Staff, staff_id, 'Staff member not found')
    recent_tasks = (
        Task.query.filter_by(staff_id=staff_id)
        .order_by(Task.created_at.desc())
        .limit(10)
        .all()
    )
    data = member.to_dict()
    data["recent_tasks"] = [task.to_dict() for task in recent_tasks]
    return jsonify({"success": True, "data": data}), 200


@bp.route('', methods=['POST'])
@has_permission('staff', 'create')
def create_staff():
    """Create a staff member; accepts JSON or multipart with an optional ``avatar`` file."""
    saved = save_uploads(request.files.getlist('avatar')[:1], IMAGES, 'avatar')
    try:
        data = staff_schema.load(get_payload())
        _ensure_unique(email=data['email'], phone=data['phone'])
        _ensure_role(data['role_id'])

        member = Staff(**data)
        if saved:
            member.avatar = saved[0]['url']
        db.session.add(member)
        db.session.commit()
    except Exception:
        db.session.rollback()
        remove_files(saved)
        raise

    current_app.logger.info(f"Staff member {member.staff_id} created by admin {g.principal.id}")

    return jsonify({
        "success": True,
        "message": "Staff member created successfully",
        "data": member.to_dict()
    }), 201


@bp.route('/<staff_id>', methods=['PUT'])
@has_permission('staff', 'update')
def update_staff(staff_id):
    member = get_or_404(Staff, staff_id, 'Staff member not found')

    saved = save_uploads(request.files.getlist('avatar')[:1], IMAGES, 'avatar')
    try:
        data = staff_schema.load(get_payload(), partial=True)
        _ensure_unique(
            email=data.get('email') if data.get('email') != member.email else None,
            phone=data.get('phone') if data.get('phone') != member.phone else None,
            exclude_id=member.staff_id,
        )
        if 'role_id' in data:
            _ensure_role(data['role_id'])

        old_avatar = member.avatar
        for field, value in data.items():
            setattr(member, field, value)
        if saved:
            member.avatar = saved[0]['url']
        db.session.commit()
    except Exception:
        db.session.rollback()
        remove_files(saved)
        raise

    if saved and old_avatar:
        remove_path(path_for_url(old_avatar))

    return jsonify({
        "success": True,
        "message": "Staff member updated successfully",
        "data": member.to_dict()
    }), 200


@bp.route('/<staff_id>', methods=['DELETE'])
@has_permission('staff', 'delete')
def delete_staff(staff_id):
    member = get_or_404(Staff, staff_id, 'Staff member not found')

    open_tasks = Task.query.filter(
        Task.staff_id == staff_id,
        Task.status.in_(OPEN_TASK_STATUSES)
    ).count()
    if open_tasks:
        raise Conflict(f"Cannot delete staff member. {open_tasks} pending tasks assigned.")

    avatar = member.avatar
    Task.query.filter_by(staff_id=staff_id).delete(synchronize_session=False)
    db.session.delete(member)
    db.session.commit()

    remove_path(path_for_url(avatar))
    current_app.logger.info(f"Staff member {staff_id} deleted by admin {g.principal.id}")

    return jsonify({"success": True, "message": "Staff member deleted successfully"}), 200


@bp.route('/<staff_id>/status', methods=['PATCH'])
@has_permission('staff', 'update')
def update_staff_status(staff_id):
    member = get_or_404(Staff, staff_id, 'Staff member not found')
    data = staff_status_schema.load(request.get_json(silent=True) or {})

    member.status = data['status']
    db.session.commit()

    return jsonify({
        "success": True,
        "message": f"Staff status updated to {member.status}",
        "data": member.to_dict()
    }), 200


@bp.route('/<staff_id>/assign-role', methods=['PATCH'])
@has_permission('staff', 'update')
def assign_role(staff_id):
    member = get_or_404(Staff, staff_id, 'Staff member not found')
    data = assign_role_schema.load(request.get_json(silent=True) or {})
    _ensure_role(data['role_id'])

    member.role_id = data['role_id']
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Role assigned successfully",
        "data": member.to_dict()
    }), 200
