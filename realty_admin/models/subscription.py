from realty_admin.extensions import db
from datetime import datetime
import uuid

SUBSCRIPTION_STATUSES = ('active', 'expired', 'cancelled', 'suspended')


class SubscriptionPlan(db.Model):
    __tablename__ = 'subscription_plans'

    """
    SubscriptionPlan Model - a purchasable bundle of property visit credits.

    A plan with at least one 'active' UserSubscription cannot be deleted.
    """

    plan_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), unique=True, nullable=False)
    price = db.Column(db.Float, nullable=False)
    duration_days = db.Column(db.Integer, nullable=False)
    visit_credits = db.Column(db.Integer, nullable=False)
    features = db.Column(db.JSON, nullable=False, default=list)
    status = db.Column(db.String(20), nullable=False, default='active')
    is_popular = db.Column(db.Boolean, nullable=False, default=False)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.plan_id,
            "name": self.name,
            "price": self.price,
            "duration_days": self.duration_days,
            "visit_credits": self.visit_credits,
            "features": list(self.features or []),
            "status": self.status,
            "is_popular": self.is_popular,
            "sort_order": self.sort_order,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class UserSubscription(db.Model):
    __tablename__ = 'user_subscriptions'

    subscription_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    plan_id = db.Column(db.String(36), db.ForeignKey('subscription_plans.plan_id', ondelete='SET NULL'), nullable=True)
    start_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    end_date = db.Column(db.DateTime, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='active')
    remaining_credits = db.Column(db.Integer, nullable=False, default=0)
    total_credits = db.Column(db.Integer, nullable=False, default=0)
    payment_id = db.Column(db.String(40), db.ForeignKey('payments.payment_id', ondelete='SET NULL'), nullable=True)
    auto_renewal = db.Column(db.Boolean, nullable=False, default=False)
    cancelled_at = db.Column(db.DateTime)
    cancelled_by = db.Column(db.String(36), db.ForeignKey('admins.admin_id', ondelete='SET NULL'), nullable=True)
    cancellation_reason = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship('User', lazy='select')
    plan = db.relationship('SubscriptionPlan', lazy='select')
    payment = db.relationship('Payment', lazy='select')

    def to_dict(self):
        return {
            "id": self.subscription_id,
            "user_id": self.user_id,
            "user": self.user.to_summary() if self.user else None,
            "plan_id": self.plan_id,
            "plan": {"id": self.plan.plan_id, "name": self.plan.name, "price": self.plan.price} if self.plan else None,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "status": self.status,
            "remaining_credits": self.remaining_credits,
            "total_credits": self.total_credits,
            "payment_id": self.payment_id,
            "auto_renewal": self.auto_renewal,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "cancelled_by": self.cancelled_by,
            "cancellation_reason": self.cancellation_reason,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
