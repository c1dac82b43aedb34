from realty_admin.extensions import db
from datetime import datetime
import uuid


class PerformanceLog(db.Model):
    __tablename__ = 'performance_logs'
    __table_args__ = (
        db.CheckConstraint('score >= 0 AND score <= 100', name='ck_performance_logs_score_range'),
    )

    log_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    staff_id = db.Column(db.String(36), db.ForeignKey('staff.staff_id', ondelete='CASCADE'), nullable=False)
    task_id = db.Column(db.String(36), db.ForeignKey('tasks.task_id', ondelete='SET NULL'), nullable=True)
    score = db.Column(db.Integer, nullable=False)
    performance_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    remarks = db.Column(db.Text)
    logged_by = db.Column(db.String(36), db.ForeignKey('admins.admin_id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    task = db.relationship('Task', lazy='select')
    logged_by_admin = db.relationship('Admin', lazy='select')

    def to_dict(self):
        return {
            "id": self.log_id,
            "staff_id": self.staff_id,
            "task_id": self.task_id,
            "task": {"id": self.task.task_id, "title": self.task.title, "task_type": self.task.task_type} if self.task else None,
            "score": self.score,
            "performance_date": self.performance_date.isoformat() if self.performance_date else None,
            "remarks": self.remarks,
            "logged_by": {"id": self.logged_by_admin.admin_id, "name": self.logged_by_admin.name} if self.logged_by_admin else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
