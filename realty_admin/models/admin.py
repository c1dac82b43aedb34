from realty_admin.extensions import db
from datetime import datetime
import uuid

admin_roles = db.Table(
    'admin_roles',
    db.Column('admin_id', db.String(36), db.ForeignKey('admins.admin_id', ondelete='CASCADE'), primary_key=True),
    db.Column('role_id', db.String(36), db.ForeignKey('roles.role_id', ondelete='CASCADE'), primary_key=True),
)

admin_permissions = db.Table(
    'admin_permissions',
    db.Column('admin_id', db.String(36), db.ForeignKey('admins.admin_id', ondelete='CASCADE'), primary_key=True),
    db.Column('permission_id', db.String(36), db.ForeignKey('permissions.permission_id', ondelete='CASCADE'), primary_key=True),
)


class Admin(db.Model):
    __tablename__ = 'admins'

    """
    Admin Model - a back-office operator account.

    Access is decided by ``is_super_admin`` first, then the direct
    ``permissions``, then the permissions of each attached role.

    Attributes:
        admin_id (str): Unique identifier (UUID)
        email (str): Login email (unique, stored lower-case)
        password_hash (str): Werkzeug password hash
        status (str): 'active' or 'inactive'
        is_super_admin (bool): Bypasses every permission check, cannot be deleted
    """

    admin_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(20))
    status = db.Column(db.String(20), nullable=False, default='active')
    is_super_admin = db.Column(db.Boolean, nullable=False, default=False)
    last_login = db.Column(db.DateTime)
    reset_password_token = db.Column(db.String(255))
    reset_password_expire = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    roles = db.relationship('Role', secondary=admin_roles, lazy='select')
    permissions = db.relationship('Permission', secondary=admin_permissions, lazy='select')

    def to_dict(self):
        return {
            "id": self.admin_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "status": self.status,
            "is_super_admin": self.is_super_admin,
            "roles": [role.to_dict(include_permissions=False) for role in self.roles],
            "permissions": [p.to_dict() for p in self.permissions],
            "last_login": self.last_login.isoformat() if self.last_login else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
