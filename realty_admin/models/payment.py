from realty_admin.extensions import db
from datetime import datetime

PAYMENT_STATUSES = ('pending', 'completed', 'failed', 'refunded', 'cancelled')
PAYMENT_METHODS = ('razorpay', 'stripe', 'bank_transfer', 'wallet')


class Payment(db.Model):
    __tablename__ = 'payments'

    """
    Payment Model - a subscription payment received through a gateway.

    ``payment_id`` is the business identifier shown to operators
    (PAY_<epoch ms>_<6 chars>) and doubles as the primary key. It is
    generated on insert when not supplied.
    """

    payment_id = db.Column(db.String(40), primary_key=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.user_id', ondelete='SET NULL'), nullable=True)
    user_type = db.Column(db.String(20), nullable=False)
    plan_id = db.Column(db.String(36), db.ForeignKey('subscription_plans.plan_id', ondelete='SET NULL'), nullable=True)
    amount = db.Column(db.Float, nullable=False)
    currency = db.Column(db.String(3), nullable=False, default='INR')
    payment_method = db.Column(db.String(20), nullable=False)
    transaction_id = db.Column(db.String(255))
    gateway_response = db.Column(db.JSON)
    status = db.Column(db.String(20), nullable=False, default='pending')
    invoice_url = db.Column(db.String(500))
    refund_amount = db.Column(db.Float, nullable=False, default=0)
    refund_reason = db.Column(db.Text)
    refunded_at = db.Column(db.DateTime)
    processed_by = db.Column(db.String(36), db.ForeignKey('admins.admin_id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship('User', lazy='select')
    plan = db.relationship('SubscriptionPlan', lazy='select')
    processor = db.relationship('Admin', lazy='select')

    def to_dict(self):
        return {
            "id": self.payment_id,
            "payment_id": self.payment_id,
            "user_id": self.user_id,
            "user": self.user.to_summary() if self.user else None,
            "user_type": self.user_type,
            "plan_id": self.plan_id,
            "plan": {"id": self.plan.plan_id, "name": self.plan.name} if self.plan else None,
            "amount": self.amount,
            "currency": self.currency,
            "payment_method": self.payment_method,
            "transaction_id": self.transaction_id,
            "gateway_response": self.gateway_response,
            "status": self.status,
            "invoice_url": self.invoice_url,
            "refund_amount": self.refund_amount,
            "refund_reason": self.refund_reason,
            "refunded_at": self.refunded_at.isoformat() if self.refunded_at else None,
            "processed_by": {"id": self.processor.admin_id, "name": self.processor.name} if self.processor else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
