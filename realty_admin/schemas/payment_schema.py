from marshmallow import fields, validate

from realty_admin.models.payment import PAYMENT_STATUSES, PAYMENT_METHODS
from realty_admin.schemas.base import BaseSchema


class PaymentSchema(BaseSchema):
    payment_id = fields.Str(validate=validate.Length(max=40))
    user_id = fields.Str(required=True)
    user_type = fields.Str(required=True, validate=validate.OneOf(['tenant', 'landlord']))
    plan_id = fields.Str(required=True)
    amount = fields.Float(required=True, validate=validate.Range(min=0))
    currency = fields.Str(validate=validate.Length(equal=3))
    payment_method = fields.Str(required=True, validate=validate.OneOf(PAYMENT_METHODS))
    transaction_id = fields.Str(allow_none=True)
    status = fields.Str(validate=validate.OneOf(PAYMENT_STATUSES))


class RefundSchema(BaseSchema):
    payment_id = fields.Str(required=True)
    refund_amount = fields.Float(allow_none=True, validate=validate.Range(min=0))
    reason = fields.Str(allow_none=True)


class PaymentStatusSchema(BaseSchema):
    payment_id = fields.Str(required=True)
    status = fields.Str(required=True, validate=validate.OneOf(PAYMENT_STATUSES))
    notes = fields.Str(allow_none=True)


class InvoiceSchema(BaseSchema):
    payment_id = fields.Str(required=True)


class GatewaySettingsSchema(BaseSchema):
    razorpay_enabled = fields.Bool()
    razorpay_key_id = fields.Str(allow_none=True)
    razorpay_key_secret = fields.Str(allow_none=True)
    stripe_enabled = fields.Bool()
    stripe_publishable_key = fields.Str(allow_none=True)
    stripe_secret_key = fields.Str(allow_none=True)
    currency = fields.Str(validate=validate.Length(equal=3))
    tax_rate = fields.Float(validate=validate.Range(min=0, max=100))
