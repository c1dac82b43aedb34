from realty_admin.extensions import db
from datetime import datetime
import uuid


class Staff(db.Model):
    __tablename__ = 'staff'

    """
    Staff Model - field and office staff managed from the admin panel.

    Each staff member holds exactly one Role. Staff with open tasks
    ('pending' or 'in-progress') cannot be deleted.
    """

    staff_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    phone = db.Column(db.String(20), unique=True, nullable=False)
    role_id = db.Column(db.String(36), db.ForeignKey('roles.role_id'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='active')
    avatar = db.Column(db.String(500))
    hire_date = db.Column(db.Date, default=lambda: datetime.utcnow().date())
    salary = db.Column(db.Float)
    address = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    role = db.relationship('Role', lazy='select')

    def to_dict(self):
        return {
            "id": self.staff_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role_id": self.role_id,
            "role": {"id": self.role.role_id, "name": self.role.name, "slug": self.role.slug} if self.role else None,
            "status": self.status,
            "avatar": self.avatar,
            "hire_date": self.hire_date.isoformat() if self.hire_date else None,
            "salary": self.salary,
            "address": self.address,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
