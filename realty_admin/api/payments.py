from datetime import datetime, timedelta

from flask import Blueprint, request, jsonify, current_app, g
from sqlalchemy import func

from realty_admin.auth import require_admin, admin_only, has_permission
from realty_admin.api.helpers import get_or_404
from realty_admin.errors import Conflict, ValidationFailed
from realty_admin.extensions import db
from realty_admin.filters import FilterBuilder
from realty_admin.models.payment import Payment, PAYMENT_STATUSES, PAYMENT_METHODS
from realty_admin.models.setting import Setting
from realty_admin.models.subscription import SubscriptionPlan
from realty_admin.models.user import User
from realty_admin.pagination import get_page_params, get_sort, paginate
from realty_admin.schemas.payment_schema import (
    PaymentSchema,
    RefundSchema,
    PaymentStatusSchema,
    InvoiceSchema,
    GatewaySettingsSchema,
)

bp = Blueprint('payments', __name__)

payment_schema = PaymentSchema()
refund_schema = RefundSchema()
payment_status_schema = PaymentStatusSchema()
invoice_schema = InvoiceSchema()
gateway_settings_schema = GatewaySettingsSchema()

PAYMENT_SORT_FIELDS = {'created_at', 'amount', 'status', 'payment_method'}
GATEWAY_SETTINGS_KEY = 'payment_gateways'
SECRET_FIELDS = ('razorpay_key_secret', 'stripe_secret_key')
ANALYTICS_DAYS = 30


@bp.before_request
def require_admin_account():
    require_admin()


def _payment_list(base_query):
    page, limit = get_page_params()
    args = request.args
    filters = (
        FilterBuilder()
        .search(args.get('search'), Payment.payment_id, Payment.transaction_id)
        .equals(Payment.status, args.get('status'), allowed=PAYMENT_STATUSES)
        .equals(Payment.user_type, args.get('user_type'), allowed=('tenant', 'landlord'))
        .equals(Payment.payment_method, args.get('payment_method'), allowed=PAYMENT_METHODS)
        .date_range(Payment.created_at, args.get('start_date'), args.get('end_date'))
    )
    query = filters.apply(base_query).order_by(get_sort(Payment, PAYMENT_SORT_FIELDS))
    payments, pagination = paginate(query, page, limit)

    return jsonify({
        "success": True,
        "data": [p.to_dict() for p in payments],
        "pagination": pagination
    }), 200


def _default_gateway_settings():
    config = current_app.config
    return {
        "razorpay_enabled": bool(config.get('RAZORPAY_KEY_ID')),
        "razorpay_key_id": config.get('RAZORPAY_KEY_ID', ''),
        "razorpay_key_secret": config.get('RAZORPAY_KEY_SECRET', ''),
        "stripe_enabled": bool(config.get('STRIPE_PUBLISHABLE_KEY')),
        "stripe_publishable_key": config.get('STRIPE_PUBLISHABLE_KEY', ''),
        "stripe_secret_key": config.get('STRIPE_SECRET_KEY', ''),
        "currency": config.get('DEFAULT_CURRENCY', 'INR'),
        "tax_rate": 0.0,
    }


def _mask(value):
    if not value:
        return ''
    if len(value) <= 4:
        return '*' * len(value)
    return '*' * (len(value) - 4) + value[-4:]


def _masked(settings):
    masked = dict(settings)
    for field in SECRET_FIELDS:
        masked[field] = _mask(masked.get(field))
    return masked


@bp.route('', methods=['GET'])
@admin_only
def list_payments():
    return _payment_list(Payment.query)


@bp.route('', methods=['POST'])
@has_permission('payments', 'manage')
def create_payment():
    """Record a payment taken outside the gateways (bank transfer, wallet, ...)."""
    data = payment_schema.load(request.get_json(silent=True) or {})

    get_or_404(User, data['user_id'], 'User not found')
    get_or_404(SubscriptionPlan, data['plan_id'], 'Subscription plan not found')
    if data.get('payment_id') and db.session.get(Payment, data['payment_id']):
        raise Conflict('Payment with this ID already exists')

    payment = Payment(**data)
    payment.currency = data.get('currency') or current_app.config.get('DEFAULT_CURRENCY', 'INR')
    payment.processed_by = g.principal.id
    db.session.add(payment)
    db.session.commit()
    current_app.logger.info(f"Payment {payment.payment_id} recorded by admin {g.principal.id}")

    return jsonify({
        "success": True,
        "message": "Payment recorded successfully",
        "data": payment.to_dict()
    }), 201


@bp.route('/pending', methods=['GET'])
@admin_only
def pending_payments():
    return _payment_list(Payment.query.filter(Payment.status == 'pending'))


@bp.route('/failed', methods=['GET'])
@admin_only
def failed_payments():
    return _payment_list(Payment.query.filter(Payment.status == 'failed'))


@bp.route('/analytics', methods=['GET'])
@admin_only
def payment_analytics():
    completed = Payment.status == 'completed'
    total_revenue = db.session.query(func.coalesce(func.sum(Payment.amount), 0)).filter(completed).scalar()
    total_refunded = (
        db.session.query(func.coalesce(func.sum(Payment.refund_amount), 0))
        .filter(Payment.status == 'refunded')
        .scalar()
    )
    by_status = dict(
        db.session.query(Payment.status, func.count(Payment.payment_id)).group_by(Payment.status).all()
    )
    by_method = (
        db.session.query(Payment.payment_method, func.count(Payment.payment_id),
                         func.coalesce(func.sum(Payment.amount), 0))
        .filter(completed)
        .group_by(Payment.payment_method)
        .all()
    )

    since = datetime.utcnow() - timedelta(days=ANALYTICS_DAYS)
    day_col = func.date(Payment.created_at)
    daily_rows = (
        db.session.query(day_col, func.sum(Payment.amount), func.count(Payment.payment_id))
        .filter(completed, Payment.created_at >= since)
        .group_by(day_col)
        .order_by(day_col)
        .all()
    )

    total_payments = sum(by_status.values())
    completed_count = by_status.get('completed', 0)

    return jsonify({
        "success": True,
        "data": {
            "total_payments": total_payments,
            "total_revenue": float(total_revenue or 0),
            "total_refunded": float(total_refunded or 0),
            "average_payment": round(float(total_revenue or 0) / completed_count, 2) if completed_count else 0,
            "success_rate": round(completed_count / total_payments * 100, 2) if total_payments else 0,
            "by_status": {status: by_status.get(status, 0) for status in PAYMENT_STATUSES},
            "by_method": [
                {"method": method, "count": count, "revenue": float(total)}
                for method, count, total in by_method
            ],
            "daily_revenue": [
                {"date": str(day), "revenue": float(total or 0), "count": count}
                for day, total, count in daily_rows
            ],
        }
    }), 200


@bp.route('/refund', methods=['POST'])
@has_permission('payments', 'update')
def refund_payment():
    data = refund_schema.load(request.get_json(silent=True) or {})
    payment = get_or_404(Payment, data['payment_id'], 'Payment not found')

    if payment.status != 'completed':
        raise ValidationFailed('Only completed payments can be refunded')

    refund_amount = data.get('refund_amount')
    if refund_amount is None:
        refund_amount = payment.amount
    if refund_amount > payment.amount:
        raise ValidationFailed('Refund amount cannot exceed payment amount')

    payment.status = 'refunded'
    payment.refund_amount = refund_amount
    payment.refund_reason = data.get('reason')
    payment.refunded_at = datetime.utcnow()
    payment.processed_by = g.principal.id
    db.session.commit()
    current_app.logger.info(f"Payment {payment.payment_id} refunded ({refund_amount}) by admin {g.principal.id}")

    return jsonify({
        "success": True,
        "message": "Payment refunded successfully",
        "data": payment.to_dict()
    }), 200


@bp.route('/update-status', methods=['POST'])
@has_permission('payments', 'update')
def update_payment_status():
    data = payment_status_schema.load(request.get_json(silent=True) or {})
    payment = get_or_404(Payment, data['payment_id'], 'Payment not found')

    payment.status = data['status']
    payment.processed_by = g.principal.id
    if data.get('notes'):
        response = dict(payment.gateway_response or {})
        response['admin_notes'] = data['notes']
        payment.gateway_response = response
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Payment status updated successfully",
        "data": payment.to_dict()
    }), 200


@bp.route('/generate-invoice', methods=['POST'])
@admin_only
def generate_invoice():
    data = invoice_schema.load(request.get_json(silent=True) or {})
    payment = get_or_404(Payment, data['payment_id'], 'Payment not found')

    payment.invoice_url = f"{request.host_url}invoices/{payment.payment_id}.pdf"
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Invoice generated successfully",
        "data": {"payment_id": payment.payment_id, "invoice_url": payment.invoice_url}
    }), 200


@bp.route('/settings', methods=['GET'])
@admin_only
def get_gateway_settings():
    settings = _default_gateway_settings()
    settings.update(Setting.get_json(GATEWAY_SETTINGS_KEY, {}) or {})
    return jsonify({"success": True, "data": _masked(settings)}), 200


@bp.route('/settings/update', methods=['POST'])
@has_permission('settings', 'update')
def update_gateway_settings():
    data = gateway_settings_schema.load(request.get_json(silent=True) or {})

    settings = _default_gateway_settings()
    settings.update(Setting.get_json(GATEWAY_SETTINGS_KEY, {}) or {})
    for field, value in data.items():
        # A masked value echoed back from the settings form leaves the secret unchanged.
        if field in SECRET_FIELDS and value and value.startswith('*'):
            continue
        settings[field] = value

    Setting.set_json(GATEWAY_SETTINGS_KEY, settings)
    db.session.commit()
    current_app.logger.info(f"Payment gateway settings updated by admin {g.principal.id}")

    return jsonify({
        "success": True,
        "message": "Payment settings updated successfully",
        "data": _masked(settings)
    }), 200


@bp.route('/<payment_id>', methods=['GET'])
@admin_only
def get_payment(payment_id):
    payment = get_or_404(Payment, payment_id, 'Payment not found')
    return jsonify({"success": True, "data": payment.to_dict()}), 200
