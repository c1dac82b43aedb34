from realty_admin.extensions import db
from datetime import datetime
import uuid


class User(db.Model):
    __tablename__ = 'users'

    """
    User Model - a marketplace end-user (tenant, landlord or both).

    Attributes:
        user_id (str): Unique identifier (UUID)
        email (str): Login email (unique, stored lower-case)
        phone (str): 10 digit phone number (unique)
        user_type (str): 'tenant', 'landlord' or 'both'
        status (str): 'active', 'inactive' or 'pending'
        is_blocked (bool): Blocked users cannot log in
        created_by (str): Admin who created the account, if any
    """

    user_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    phone = db.Column(db.String(10), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='active')
    user_type = db.Column(db.String(20), nullable=False, default='tenant')
    address = db.Column(db.String(255))
    dob = db.Column(db.Date)
    gender = db.Column(db.String(10))
    avatar = db.Column(db.String(500))
    is_blocked = db.Column(db.Boolean, nullable=False, default=False)
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    last_login = db.Column(db.DateTime)
    reset_password_token = db.Column(db.String(255))
    reset_password_expire = db.Column(db.DateTime)
    created_by = db.Column(db.String(36), db.ForeignKey('admins.admin_id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    creator = db.relationship('Admin', foreign_keys=[created_by], lazy='select')

    def to_dict(self):
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "status": self.status,
            "user_type": self.user_type,
            "address": self.address,
            "dob": self.dob.isoformat() if self.dob else None,
            "gender": self.gender,
            "avatar": self.avatar,
            "is_blocked": self.is_blocked,
            "is_verified": self.is_verified,
            "last_login": self.last_login.isoformat() if self.last_login else None,
            "created_by": {"id": self.creator.admin_id, "name": self.creator.name} if self.creator else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_summary(self):
        return {"id": self.user_id, "name": self.name, "email": self.email, "phone": self.phone}
