from marshmallow import fields, validate, validates_schema, ValidationError

from realty_admin.models.subscription import SUBSCRIPTION_STATUSES
from realty_admin.schemas.base import BaseSchema, IdList


class PlanSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    price = fields.Float(required=True, validate=validate.Range(min=0, error="Price cannot be negative"))
    duration_days = fields.Int(required=True, validate=validate.Range(min=1, error="Duration must be at least 1 day"))
    visit_credits = fields.Int(required=True, validate=validate.Range(min=0))
    features = fields.List(fields.Str())
    status = fields.Str(validate=validate.OneOf(['active', 'inactive']))
    is_popular = fields.Bool()
    sort_order = fields.Int()


class UserSubscriptionSchema(BaseSchema):
    user_id = fields.Str(required=True)
    plan_id = fields.Str(required=True)
    payment_id = fields.Str(allow_none=True)
    start_date = fields.DateTime(allow_none=True)
    auto_renewal = fields.Bool()


class CancelSubscriptionSchema(BaseSchema):
    user_id = fields.Str(required=True)
    reason = fields.Str(allow_none=True)


class SubscriptionTargetSchema(BaseSchema):
    """Addresses a subscription directly or through the user who holds it."""
    subscription_id = fields.Str()
    user_id = fields.Str()

    @validates_schema
    def require_target(self, data, **kwargs):
        if not data.get('subscription_id') and not data.get('user_id'):
            raise ValidationError('user_id or subscription_id is required', 'user_id')


class AddCreditsSchema(SubscriptionTargetSchema):
    credits = fields.Int(required=True, validate=validate.Range(min=1, error="Credits must be at least 1"))
    reason = fields.Str(allow_none=True)


class SuspendSubscriptionSchema(SubscriptionTargetSchema):
    action = fields.Str(required=True)
    reason = fields.Str(allow_none=True)


class BulkUpdateSubscriptionsSchema(BaseSchema):
    subscription_ids = IdList(required=True, validate=validate.Length(min=1))
    status = fields.Str(required=True, validate=validate.OneOf(SUBSCRIPTION_STATUSES))
