from realty_admin.extensions import db
from datetime import datetime
import uuid

TASK_TYPES = ('visit', 'maintenance', 'onboarding', 'verification')
TASK_PRIORITIES = ('low', 'medium', 'high', 'urgent')
TASK_STATUSES = ('pending', 'in-progress', 'completed', 'cancelled')
OPEN_TASK_STATUSES = ('pending', 'in-progress')


class Task(db.Model):
    __tablename__ = 'tasks'

    task_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    staff_id = db.Column(db.String(36), db.ForeignKey('staff.staff_id'), nullable=False)
    property_id = db.Column(db.String(36), db.ForeignKey('properties.property_id', ondelete='SET NULL'), nullable=True)
    task_type = db.Column(db.String(20), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    priority = db.Column(db.String(10), nullable=False, default='medium')
    status = db.Column(db.String(20), nullable=False, default='pending')
    due_date = db.Column(db.DateTime, nullable=False)
    completed_at = db.Column(db.DateTime)
    notes = db.Column(db.Text)
    created_by = db.Column(db.String(36), db.ForeignKey('admins.admin_id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    staff = db.relationship('Staff', lazy='select')
    property = db.relationship('Property', lazy='select')
    creator = db.relationship('Admin', lazy='select')

    def to_dict(self):
        return {
            "id": self.task_id,
            "staff_id": self.staff_id,
            "staff": {"id": self.staff.staff_id, "name": self.staff.name, "email": self.staff.email} if self.staff else None,
            "property_id": self.property_id,
            "property": {"id": self.property.property_id, "title": self.property.title} if self.property else None,
            "task_type": self.task_type,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "status": self.status,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "notes": self.notes,
            "created_by": {"id": self.creator.admin_id, "name": self.creator.name} if self.creator else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
