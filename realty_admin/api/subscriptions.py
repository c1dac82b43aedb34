from datetime import datetime, timedelta

from flask import Blueprint, request, jsonify, current_app, g
from sqlalchemy import func

from realty_admin.auth import require_admin, admin_only, has_permission
from realty_admin.api.helpers import get_or_404
from realty_admin.errors import Conflict, NotFound, ValidationFailed
from realty_admin.extensions import db
from realty_admin.filters import FilterBuilder
from realty_admin.models.payment import Payment
from realty_admin.models.subscription import SubscriptionPlan, UserSubscription, SUBSCRIPTION_STATUSES
from realty_admin.models.user import User
from realty_admin.pagination import get_page_params, get_sort, paginate
from realty_admin.schemas.subscription_schema import (
    PlanSchema,
    UserSubscriptionSchema,
    CancelSubscriptionSchema,
    AddCreditsSchema,
    SuspendSubscriptionSchema,
    BulkUpdateSubscriptionsSchema,
)

bp = Blueprint('subscriptions', __name__)

plan_schema = PlanSchema()
user_subscription_schema = UserSubscriptionSchema()
cancel_schema = CancelSubscriptionSchema()
add_credits_schema = AddCreditsSchema()
suspend_schema = SuspendSubscriptionSchema()
bulk_update_schema = BulkUpdateSubscriptionsSchema()

SUBSCRIPTION_SORT_FIELDS = {'created_at', 'start_date', 'end_date', 'remaining_credits', 'status'}


@bp.before_request
def require_admin_account():
    require_admin()


def _active_subscription_count(plan_id):
    return UserSubscription.query.filter_by(plan_id=plan_id, status='active').count()


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------

@bp.route('/plans', methods=['GET'])
@admin_only
def list_plans():
    """Plans ordered for display: sort_order, then price. ``status=all`` lists every plan."""
    status = request.args.get('status', 'active')
    query = SubscriptionPlan.query
    if status != 'all':
        query = query.filter(SubscriptionPlan.status == status)
    plans = query.order_by(SubscriptionPlan.sort_order.asc(), SubscriptionPlan.price.asc()).all()

    return jsonify({"success": True, "data": [plan.to_dict() for plan in plans]}), 200


@bp.route('/create', methods=['POST'])
@has_permission('subscriptions', 'create')
def create_plan():
    data = plan_schema.load(request.get_json(silent=True) or {})

    if SubscriptionPlan.query.filter_by(name=data['name']).first():
        raise Conflict('Plan with this name already exists')

    plan = SubscriptionPlan(**data)
    db.session.add(plan)
    db.session.commit()
    current_app.logger.info(f"Subscription plan {plan.plan_id} created by admin {g.principal.id}")

    return jsonify({
        "success": True,
        "message": "Subscription plan created successfully",
        "data": plan.to_dict()
    }), 201


@bp.route('/update', methods=['POST'])
@has_permission('subscriptions', 'update')
def update_plan():
    payload = request.get_json(silent=True) or {}
    plan = get_or_404(SubscriptionPlan, payload.get('plan_id'), 'Subscription plan not found')
    data = plan_schema.load(payload, partial=True)

    if 'name' in data and data['name'] != plan.name:
        if SubscriptionPlan.query.filter(
            SubscriptionPlan.name == data['name'],
            SubscriptionPlan.plan_id != plan.plan_id
        ).first():
            raise Conflict('Plan with this name already exists')

    for field, value in data.items():
        setattr(plan, field, value)
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Subscription plan updated successfully",
        "data": plan.to_dict()
    }), 200


# ---------------------------------------------------------------------------
# User subscriptions
# ---------------------------------------------------------------------------

@bp.route('/user-subscriptions', methods=['GET'])
@admin_only
def list_user_subscriptions():
    page, limit = get_page_params()
    filters = (
        FilterBuilder()
        .equals(UserSubscription.status, request.args.get('status'), allowed=SUBSCRIPTION_STATUSES)
        .equals(UserSubscription.plan_id, request.args.get('plan_id'))
        .equals(UserSubscription.user_id, request.args.get('user_id'))
    )
    query = filters.apply(UserSubscription.query).order_by(get_sort(UserSubscription, SUBSCRIPTION_SORT_FIELDS))
    subscriptions, pagination = paginate(query, page, limit)

    return jsonify({
        "success": True,
        "data": [s.to_dict() for s in subscriptions],
        "pagination": pagination
    }), 200


@bp.route('/user-subscriptions', methods=['POST'])
@has_permission('subscriptions', 'create')
def create_user_subscription():
    """Put a user on a plan; dates and credits come from the plan."""
    data = user_subscription_schema.load(request.get_json(silent=True) or {})

    user = get_or_404(User, data['user_id'], 'User not found')
    plan = get_or_404(SubscriptionPlan, data['plan_id'], 'Subscription plan not found')
    if plan.status != 'active':
        raise ValidationFailed('Subscription plan is not active')
    if data.get('payment_id'):
        get_or_404(Payment, data['payment_id'], 'Payment not found')

    if UserSubscription.query.filter_by(user_id=user.user_id, status='active').first():
        raise Conflict('User already has an active subscription')

    start_date = data.get('start_date') or datetime.utcnow()
    subscription = UserSubscription(
        user_id=user.user_id,
        plan_id=plan.plan_id,
        start_date=start_date,
        end_date=start_date + timedelta(days=plan.duration_days),
        status='active',
        remaining_credits=plan.visit_credits,
        total_credits=plan.visit_credits,
        payment_id=data.get('payment_id'),
        auto_renewal=data.get('auto_renewal', False),
    )
    db.session.add(subscription)
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Subscription created successfully",
        "data": subscription.to_dict()
    }), 201


@bp.route('/user-subscription/cancel', methods=['POST'])
@has_permission('subscriptions', 'update')
def cancel_user_subscription():
    data = cancel_schema.load(request.get_json(silent=True) or {})

    subscription = UserSubscription.query.filter_by(user_id=data['user_id'], status='active').first()
    if subscription is None:
        raise NotFound('No active subscription found for this user')

    subscription.status = 'cancelled'
    subscription.cancelled_at = datetime.utcnow()
    subscription.cancelled_by = g.principal.id
    subscription.cancellation_reason = data.get('reason') or 'Cancelled by admin'
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Subscription cancelled successfully",
        "data": subscription.to_dict()
    }), 200


def _target_subscription(data, statuses):
    """The subscription named by ``subscription_id``, or the user's current one in ``statuses``."""
    if data.get('subscription_id'):
        return get_or_404(UserSubscription, data['subscription_id'], 'Subscription not found')

    subscription = (
        UserSubscription.query
        .filter(UserSubscription.user_id == data['user_id'], UserSubscription.status.in_(statuses))
        .order_by(UserSubscription.created_at.desc())
        .first()
    )
    if subscription is None:
        raise NotFound('Subscription not found for this user')
    return subscription


@bp.route('/user-subscription/add-credits', methods=['POST'])
@bp.route('/add-credits', methods=['POST'])
@has_permission('subscriptions', 'update')
def add_credits():
    """Bonus visit credits on top of the plan allowance."""
    data = add_credits_schema.load(request.get_json(silent=True) or {})
    subscription = _target_subscription(data, ('active',))

    subscription.remaining_credits += data['credits']
    subscription.total_credits += data['credits']
    db.session.commit()
    current_app.logger.info(
        f"Added {data['credits']} credits to subscription {subscription.subscription_id} by admin {g.principal.id}"
    )

    result = subscription.to_dict()
    result["reason"] = data.get('reason')
    return jsonify({
        "success": True,
        "message": f"{data['credits']} bonus credits added successfully",
        "data": result
    }), 200


@bp.route('/user-subscription/suspend', methods=['POST'])
@bp.route('/suspend', methods=['POST'])
@has_permission('subscriptions', 'update')
def suspend_subscription():
    """Suspend or restore a subscription (``action``: suspend | restore)."""
    data = suspend_schema.load(request.get_json(silent=True) or {})
    if data['action'] not in ('suspend', 'restore'):
        raise ValidationFailed('Invalid action. Use suspend or restore')

    subscription = _target_subscription(data, ('active', 'suspended'))

    if data['action'] == 'suspend':
        subscription.status = 'suspended'
        message = 'Subscription suspended successfully'
    else:
        subscription.status = 'active'
        message = 'Subscription restored successfully'

    db.session.commit()

    return jsonify({"success": True, "message": message, "data": subscription.to_dict()}), 200


@bp.route('/bulk-update', methods=['POST'])
@has_permission('subscriptions', 'update')
def bulk_update_subscriptions():
    data = bulk_update_schema.load(request.get_json(silent=True) or {})

    updated = UserSubscription.query.filter(
        UserSubscription.subscription_id.in_(data['subscription_ids'])
    ).update({"status": data['status'], "updated_at": datetime.utcnow()}, synchronize_session=False)
    db.session.commit()

    return jsonify({
        "success": True,
        "message": f"{updated} subscriptions updated",
        "data": {"updated_count": updated}
    }), 200


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@bp.route('/reports/subscriptions', methods=['GET'])
@admin_only
def subscription_report():
    by_status = dict(
        db.session.query(UserSubscription.status, func.count(UserSubscription.subscription_id))
        .group_by(UserSubscription.status).all()
    )
    revenue_by_plan = (
        db.session.query(SubscriptionPlan.plan_id, SubscriptionPlan.name,
                         func.count(Payment.payment_id), func.coalesce(func.sum(Payment.amount), 0))
        .join(Payment, Payment.plan_id == SubscriptionPlan.plan_id)
        .filter(Payment.status == 'completed')
        .group_by(SubscriptionPlan.plan_id, SubscriptionPlan.name)
        .all()
    )
    popular_plans = (
        db.session.query(SubscriptionPlan.plan_id, SubscriptionPlan.name, func.count(UserSubscription.subscription_id))
        .join(UserSubscription, UserSubscription.plan_id == SubscriptionPlan.plan_id)
        .group_by(SubscriptionPlan.plan_id, SubscriptionPlan.name)
        .order_by(func.count(UserSubscription.subscription_id).desc())
        .limit(5)
        .all()
    )

    return jsonify({
        "success": True,
        "data": {
            "total": UserSubscription.query.count(),
            "by_status": {status: by_status.get(status, 0) for status in SUBSCRIPTION_STATUSES},
            "revenue_by_plan": [
                {"plan_id": plan_id, "plan": name, "payments": count, "revenue": float(total)}
                for plan_id, name, count, total in revenue_by_plan
            ],
            "popular_plans": [
                {"plan_id": plan_id, "plan": name, "subscriptions": count}
                for plan_id, name, count in popular_plans
            ],
        }
    }), 200


@bp.route('/usage/<subscription_id>', methods=['GET'])
@admin_only
def subscription_usage(subscription_id):
    subscription = get_or_404(UserSubscription, subscription_id, 'Subscription not found')

    used = subscription.total_credits - subscription.remaining_credits
    days_remaining = max((subscription.end_date - datetime.utcnow()).days, 0) if subscription.end_date else 0

    return jsonify({
        "success": True,
        "data": {
            "subscription": subscription.to_dict(),
            "credits_used": used,
            "credits_remaining": subscription.remaining_credits,
            "usage_percentage": round(used / subscription.total_credits * 100, 2) if subscription.total_credits else 0,
            "days_remaining": days_remaining,
        }
    }), 200


# ---------------------------------------------------------------------------
# Single plan
# ---------------------------------------------------------------------------

@bp.route('/<plan_id>', methods=['GET'])
@admin_only
def get_plan(plan_id):
    plan = get_or_404(SubscriptionPlan, plan_id, 'Subscription plan not found')
    data = plan.to_dict()
    data["active_subscriptions"] = _active_subscription_count(plan_id)
    return jsonify({"success": True, "data": data}), 200


@bp.route('/<plan_id>', methods=['DELETE'])
@has_permission('subscriptions', 'delete')
def delete_plan(plan_id):
    plan = get_or_404(SubscriptionPlan, plan_id, 'Subscription plan not found')

    active = _active_subscription_count(plan_id)
    if active:
        raise Conflict(f"Cannot delete plan. {active} active subscriptions exist.")

    db.session.delete(plan)
    db.session.commit()
    current_app.logger.info(f"Subscription plan {plan_id} deleted by admin {g.principal.id}")

    return jsonify({"success": True, "message": "Subscription plan deleted successfully"}), 200
