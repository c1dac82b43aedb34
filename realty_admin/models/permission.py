from realty_admin.extensions import db
from datetime import datetime
import uuid

PERMISSION_MODULES = ('users', 'properties', 'dashboard', 'staff', 'payments', 'subscriptions', 'settings', 'blog')
PERMISSION_ACTIONS = ('create', 'read', 'update', 'delete', 'manage')


class Permission(db.Model):
    __tablename__ = 'permissions'
    __table_args__ = (
        db.UniqueConstraint('module', 'action', name='uq_permissions_module_action'),
    )

    """
    Permission Model - an atomic (module, action) capability grant.

    Granted to admins either directly or through a Role.
    """

    permission_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), unique=True, nullable=False)
    module = db.Column(db.String(50), nullable=False)
    action = db.Column(db.String(20), nullable=False)
    description = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def matches(self, module, action):
        return self.module == module and self.action == action

    def to_dict(self):
        return {
            "id": self.permission_id,
            "name": self.name,
            "module": self.module,
            "action": self.action,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
