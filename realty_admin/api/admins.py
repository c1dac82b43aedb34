from collections import OrderedDict

from flask import Blueprint, request, jsonify, current_app, g
from werkzeug.security import generate_password_hash

from realty_admin.auth import admin_only, super_admin_only
from realty_admin.api.helpers import get_or_404
from realty_admin.errors import Conflict, ValidationFailed
from realty_admin.extensions import db
from realty_admin.filters import FilterBuilder
from realty_admin.models.admin import Admin
from realty_admin.models.permission import Permission
from realty_admin.models.role import Role
from realty_admin.pagination import get_page_params, get_sort, paginate
from realty_admin.schemas.admin_schema import AdminSchema, RoleSchema, PermissionSchema
from realty_admin.utils import make_slug

bp = Blueprint('admins', __name__)

admin_schema = AdminSchema()
role_schema = RoleSchema()
permission_schema = PermissionSchema()

ADMIN_SORT_FIELDS = {'created_at', 'name', 'email', 'last_login'}


def _load_roles(role_ids):
    roles = Role.query.filter(Role.role_id.in_(role_ids)).all() if role_ids else []
    missing = set(role_ids or []) - {r.role_id for r in roles}
    if missing:
        raise ValidationFailed('Invalid role ID', errors=[
            {"field": "role_ids", "message": "Invalid role ID", "value": sorted(missing)[0]}
        ])
    return roles


def _load_permissions(permission_ids):
    permissions = Permission.query.filter(Permission.permission_id.in_(permission_ids)).all() if permission_ids else []
    missing = set(permission_ids or []) - {p.permission_id for p in permissions}
    if missing:
        raise ValidationFailed('Invalid permission ID', errors=[
            {"field": "permission_ids", "message": "Invalid permission ID", "value": sorted(missing)[0]}
        ])
    return permissions


# ---------------------------------------------------------------------------
# Admin accounts
# ---------------------------------------------------------------------------

@bp.route('/admins', methods=['GET'])
@admin_only
def list_admins():
    """
    List admin accounts.

    Query Parameters:
        - page, limit
        - search: matches name or email
        - status: active | inactive
        - sort_by: created_at, name, email, last_login
        - sort_order: asc | desc
    """
    page, limit = get_page_params()

    filters = (
        FilterBuilder()
        .search(request.args.get('search'), Admin.name, Admin.email)
        .equals(Admin.status, request.args.get('status'), allowed={'active', 'inactive'})
    )
    query = filters.apply(Admin.query).order_by(get_sort(Admin, ADMIN_SORT_FIELDS))
    admins, pagination = paginate(query, page, limit)

    return jsonify({
        "success": True,
        "data": [admin.to_dict() for admin in admins],
        "pagination": pagination
    }), 200


@bp.route('/admins/<admin_id>', methods=['GET'])
@admin_only
def get_admin(admin_id):
    admin = get_or_404(Admin, admin_id, 'Admin not found')
    return jsonify({"success": True, "data": admin.to_dict()}), 200


@bp.route('/admins', methods=['POST'])
@super_admin_only
def create_admin():
    data = admin_schema.load(request.get_json(silent=True) or {})

    if Admin.query.filter_by(email=data['email']).first():
        raise Conflict('Admin with this email already exists')

    admin = Admin(
        name=data['name'],
        email=data['email'],
        password_hash=generate_password_hash(data['password']),
        phone=data.get('phone'),
        status=data.get('status', 'active'),
        is_super_admin=data.get('is_super_admin', False),
    )
    admin.roles = _load_roles(data.get('role_ids'))
    admin.permissions = _load_permissions(data.get('permission_ids'))

    db.session.add(admin)
    db.session.commit()
    current_app.logger.info(f"Admin {admin.admin_id} created by {g.principal.id}")

    return jsonify({
        "success": True,
        "message": "Admin created successfully",
        "data": admin.to_dict()
    }), 201


@bp.route('/admins/<admin_id>', methods=['PUT'])
@super_admin_only
def update_admin(admin_id):
    admin = get_or_404(Admin, admin_id, 'Admin not found')
    data = admin_schema.load(request.get_json(silent=True) or {}, partial=True)

    if 'email' in data and data['email'] != admin.email:
        if Admin.query.filter(Admin.email == data['email'], Admin.admin_id != admin.admin_id).first():
            raise Conflict('Admin with this email already exists')
        admin.email = data['email']

    for field in ('name', 'phone', 'status', 'is_super_admin'):
        if field in data:
            setattr(admin, field, data[field])
    if 'password' in data:
        admin.password_hash = generate_password_hash(data['password'])
    if 'role_ids' in data:
        admin.roles = _load_roles(data['role_ids'])
    if 'permission_ids' in data:
        admin.permissions = _load_permissions(data['permission_ids'])

    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Admin updated successfully",
        "data": admin.to_dict()
    }), 200


@bp.route('/admins/<admin_id>', methods=['DELETE'])
@super_admin_only
def delete_admin(admin_id):
    admin = get_or_404(Admin, admin_id, 'Admin not found')

    if admin.is_super_admin:
        raise Conflict('Cannot delete super admin')

    db.session.delete(admin)
    db.session.commit()
    current_app.logger.info(f"Admin {admin_id} deleted by {g.principal.id}")

    return jsonify({"success": True, "message": "Admin deleted successfully"}), 200


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------

@bp.route('/roles', methods=['GET'])
@admin_only
def list_roles():
    roles = Role.query.filter_by(is_active=True).order_by(Role.name.asc()).all()
    return jsonify({"success": True, "data": [role.to_dict() for role in roles]}), 200


@bp.route('/roles', methods=['POST'])
@super_admin_only
def create_role():
    data = role_schema.load(request.get_json(silent=True) or {})
    slug = make_slug(data['name'])

    existing = Role.query.filter((Role.name == data['name']) | (Role.slug == slug)).first()
    if existing:
        raise Conflict('Role with this name already exists')

    role = Role(
        name=data['name'],
        slug=slug,
        description=data.get('description'),
        is_active=data.get('is_active', True),
    )
    role.permissions = _load_permissions(data.get('permission_ids'))

    db.session.add(role)
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Role created successfully",
        "data": role.to_dict()
    }), 201


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------

@bp.route('/permissions', methods=['GET'])
@admin_only
def list_permissions():
    """All permissions, plus the same list grouped by module."""
    permissions = Permission.query.order_by(Permission.module.asc(), Permission.action.asc()).all()

    grouped = OrderedDict()
    for permission in permissions:
        grouped.setdefault(permission.module, []).append(permission.to_dict())

    return jsonify({
        "success": True,
        "data": {
            "permissions": [p.to_dict() for p in permissions],
            "grouped": grouped,
        }
    }), 200


@bp.route('/permissions', methods=['POST'])
@super_admin_only
def create_permission():
    data = permission_schema.load(request.get_json(silent=True) or {})

    existing = Permission.query.filter(
        (Permission.name == data['name'])
        | ((Permission.module == data['module']) & (Permission.action == data['action']))
    ).first()
    if existing:
        raise Conflict('Permission already exists')

    permission = Permission(**data)
    db.session.add(permission)
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Permission created successfully",
        "data": permission.to_dict()
    }), 201
