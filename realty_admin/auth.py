"""
Authentication and authorization for API routes.

Tokens are Flask-JWT-Extended access tokens whose subject is the account id
and whose ``type`` claim says which table the account lives in ('admin' or
'user'). Decorators resolve the caller into a principal and store it on
``flask.g.principal``:

    @bp.route('/things', methods=['POST'])
    @has_permission('things', 'create')
    def create_thing():
        admin = g.principal.account
"""
from dataclasses import dataclass
from functools import wraps
from typing import Optional, Union

from flask import g, current_app
from flask_jwt_extended import create_access_token, verify_jwt_in_request, get_jwt
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from realty_admin.errors import Unauthenticated, AccountDisabled, Forbidden
from realty_admin.extensions import db
from realty_admin.models.admin import Admin
from realty_admin.models.user import User

ADMIN = 'admin'
USER = 'user'


@dataclass(frozen=True)
class AdminPrincipal:
    account: Admin
    kind: str = ADMIN

    @property
    def id(self):
        return self.account.admin_id


@dataclass(frozen=True)
class UserPrincipal:
    account: User
    kind: str = USER

    @property
    def id(self):
        return self.account.user_id


Principal = Union[AdminPrincipal, UserPrincipal]


def generate_token(account_id: str, account_type: str) -> str:
    return create_access_token(identity=str(account_id), additional_claims={"type": account_type})


def resolve_principal(account_id: Optional[str], account_type: Optional[str]) -> Optional[Principal]:
    """Load the account a token points at, tagged with its kind."""
    if not account_id:
        return None
    if account_type == ADMIN:
        admin = db.session.get(Admin, account_id)
        return AdminPrincipal(admin) if admin else None
    if account_type == USER:
        user = db.session.get(User, account_id)
        return UserPrincipal(user) if user else None
    return None


def find_principal_by_email(email: str) -> Optional[Principal]:
    """Credential lookup for login: admin accounts first, then end users."""
    email = (email or '').strip().lower()
    admin = Admin.query.filter_by(email=email).first()
    if admin:
        return AdminPrincipal(admin)
    user = User.query.filter_by(email=email).first()
    if user:
        return UserPrincipal(user)
    return None


def admin_has_permission(admin: Admin, module: str, action: str) -> bool:
    """
    Decide whether ``admin`` may perform ``action`` on ``module``.

    First match wins: super-admin flag, then direct permissions, then the
    permissions of each attached role. Roles are unordered; any matching
    role is enough.
    """
    if admin.is_super_admin:
        return True

    if any(p.matches(module, action) for p in admin.permissions):
        return True

    for role in admin.roles:
        if any(p.matches(module, action) for p in role.permissions):
            return True

    return False


def _authenticate() -> Principal:
    # Missing/invalid/expired tokens raise here and are answered by the JWT loaders
    verify_jwt_in_request()
    claims = get_jwt()
    principal = resolve_principal(claims.get('sub'), claims.get('type'))
    if principal is None:
        current_app.logger.warning(f"Auth: token subject {claims.get('sub')} no longer exists")
        raise Unauthenticated('Token is valid but account not found')
    if principal.account.status == 'inactive':
        raise AccountDisabled()
    return principal


def protect(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.principal = _authenticate()
        return fn(*args, **kwargs)
    return wrapper


def optional_auth(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.principal = None
        try:
            verify_jwt_in_request(optional=True)
            claims = get_jwt()
        except (JWTExtendedException, PyJWTError) as e:
            current_app.logger.debug(f"Optional auth: ignoring bad token ({e})")
            claims = {}
        if claims:
            principal = resolve_principal(claims.get('sub'), claims.get('type'))
            if principal is not None and principal.account.status == 'active':
                g.principal = principal
        return fn(*args, **kwargs)
    return wrapper


def require_admin() -> AdminPrincipal:
    principal = g.principal = _authenticate()
    if principal.kind != ADMIN:
        raise Forbidden('Access denied. Admin access required.')
    return principal


def admin_only(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        require_admin()
        return fn(*args, **kwargs)
    return wrapper


def super_admin_only(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        principal = require_admin()
        if not principal.account.is_super_admin:
            raise Forbidden('Access denied. Super admin access required.')
        return fn(*args, **kwargs)
    return wrapper


def has_permission(module: str, action: str):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            principal = require_admin()
            if not admin_has_permission(principal.account, module, action):
                current_app.logger.info(
                    f"Permission denied: admin={principal.id} module={module} action={action}"
                )
                raise Forbidden(f"Access denied. {action} permission required for {module} module.")
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def current_principal() -> Optional[Principal]:
    return getattr(g, 'principal', None)
