from realty_admin.extensions import db
from datetime import datetime
import uuid

role_permissions = db.Table(
    'role_permissions',
    db.Column('role_id', db.String(36), db.ForeignKey('roles.role_id', ondelete='CASCADE'), primary_key=True),
    db.Column('permission_id', db.String(36), db.ForeignKey('permissions.permission_id', ondelete='CASCADE'), primary_key=True),
)


class Role(db.Model):
    __tablename__ = 'roles'

    """
    Role Model - a named bundle of permissions assignable to admins and staff.

    Attributes:
        role_id (str): Unique identifier (UUID)
        name (str): Display name (unique)
        slug (str): URL-safe form of the name (unique, derived on insert)
        is_active (bool): Inactive roles are hidden from the role picker
    """

    role_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), unique=True, nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False)
    description = db.Column(db.String(255))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    permissions = db.relationship('Permission', secondary=role_permissions, lazy='select')

    def to_dict(self, include_permissions=True):
        data = {
            "id": self.role_id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_permissions:
            data["permissions"] = [p.to_dict() for p in self.permissions]
        return data
