import secrets
from datetime import datetime

from flask import Blueprint, request, jsonify, current_app, g
from werkzeug.security import generate_password_hash, check_password_hash

from realty_admin.auth import USER, find_principal_by_email, generate_token, protect
from realty_admin.errors import Unauthenticated, AccountDisabled, NotFound, ValidationFailed, ServerError, Conflict
from realty_admin.extensions import db
from realty_admin.models.user import User
from realty_admin.schemas.auth_schema import (
    LoginSchema,
    ForgotPasswordSchema,
    ResetPasswordSchema,
    UpdateProfileSchema,
    ChangePasswordSchema,
)
from realty_admin.services.email_sender import send_template_email

# Create Blueprint
bp = Blueprint('auth', __name__)

# Initialize schemas
login_schema = LoginSchema()
forgot_password_schema = ForgotPasswordSchema()
reset_password_schema = ResetPasswordSchema()
update_profile_schema = UpdateProfileSchema()
change_password_schema = ChangePasswordSchema()


@bp.route('/login', methods=['POST'])
def login():
    """
    Login Endpoint

    Flow:
    1. Validate email/password
    2. Look the email up among admins, then end users
    3. Verify password hash and account state
    4. Return a bearer token tagged with the account type

    Responses:
      200 Login successful: {access_token, user, user_type}
      400 Validation failed
      401 Invalid credentials, deactivated or blocked account
    """
    data = login_schema.load(request.get_json(silent=True) or {})

    principal = find_principal_by_email(data['email'])
    if principal is None or not check_password_hash(principal.account.password_hash, data['password']):
        current_app.logger.info(f"Login: failed attempt for {data['email']}")
        raise Unauthenticated('Invalid email or password')

    account = principal.account
    if account.status == 'inactive':
        raise AccountDisabled()
    if principal.kind == USER and account.is_blocked:
        raise Unauthenticated('Account has been blocked')

    account.last_login = datetime.utcnow()
    db.session.commit()

    access_token = generate_token(principal.id, principal.kind)
    current_app.logger.info(f"Login: {principal.kind} {principal.id} signed in")

    return jsonify({
        "success": True,
        "message": "Login successful",
        "data": {
            "access_token": access_token,
            "user": account.to_dict(),
            "user_type": principal.kind,
        }
    }), 200


@bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    """Issue a short-lived reset token and email it to the account owner."""
    data = forgot_password_schema.load(request.get_json(silent=True) or {})

    principal = find_principal_by_email(data['email'])
    if principal is None:
        raise NotFound('No account found with that email')

    account = principal.account
    expires = current_app.config['RESET_TOKEN_EXPIRES']
    reset_token = secrets.token_hex(20)
    account.reset_password_token = reset_token
    account.reset_password_expire = datetime.utcnow() + expires
    db.session.commit()

    try:
        send_template_email('password_reset', account.email, {
            "name": account.name,
            "reset_token": reset_token,
            "expires_minutes": int(expires.total_seconds() // 60),
        })
    except ValueError as e:
        current_app.logger.error(f"Forgot password: email to {account.email} failed: {e}")
        account.reset_password_token = None
        account.reset_password_expire = None
        db.session.commit()
        raise ServerError('Email could not be sent')

    return jsonify({"success": True, "message": "Password reset email sent"}), 200


@bp.route('/reset-password', methods=['POST'])
def reset_password():
    data = reset_password_schema.load(request.get_json(silent=True) or {})

    principal = find_principal_by_email(data['email'])
    account = principal.account if principal else None
    if (
        account is None
        or not account.reset_password_token
        or not secrets.compare_digest(account.reset_password_token, data['token'])
        or account.reset_password_expire is None
        or account.reset_password_expire < datetime.utcnow()
    ):
        raise ValidationFailed('Invalid or expired reset token')

    account.password_hash = generate_password_hash(data['password'])
    account.reset_password_token = None
    account.reset_password_expire = None
    db.session.commit()

    return jsonify({"success": True, "message": "Password reset successful"}), 200


@bp.route('/me', methods=['GET'])
@protect
def me():
    """Return the current logged-in account."""
    principal = g.principal
    return jsonify({
        "success": True,
        "data": {
            "user": principal.account.to_dict(),
            "user_type": principal.kind,
        }
    }), 200


@bp.route('/profile', methods=['PUT'])
@protect
def update_profile():
    """Update name and phone; end users may also change their address."""
    data = update_profile_schema.load(request.get_json(silent=True) or {})
    principal = g.principal
    account = principal.account

    if 'phone' in data and principal.kind == USER:
        taken = User.query.filter(User.phone == data['phone'], User.user_id != account.user_id).first()
        if taken:
            raise Conflict('Phone number already in use')

    if 'name' in data:
        account.name = data['name']
    if 'phone' in data:
        account.phone = data['phone']
    if 'address' in data and principal.kind == USER:
        account.address = data['address']

    db.session.commit()
    current_app.logger.info(f"Profile updated for {principal.kind} {principal.id}")

    return jsonify({
        "success": True,
        "message": "Profile updated successfully",
        "data": account.to_dict()
    }), 200


@bp.route('/change-password', methods=['PUT'])
@protect
def change_password():
    data = change_password_schema.load(request.get_json(silent=True) or {})
    account = g.principal.account

    if not check_password_hash(account.password_hash, data['current_password']):
        raise Unauthenticated('Current password is incorrect')

    account.password_hash = generate_password_hash(data['new_password'])
    db.session.commit()

    return jsonify({"success": True, "message": "Password changed successfully"}), 200
