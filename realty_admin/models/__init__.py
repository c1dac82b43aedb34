from realty_admin.models.permission import Permission
from realty_admin.models.role import Role, role_permissions
from realty_admin.models.admin import Admin, admin_roles, admin_permissions
from realty_admin.models.user import User
from realty_admin.models.taxonomy import PropertyCategory, PropertyFeature, PropertyAmenity
from realty_admin.models.property import Property, property_features, property_amenities
from realty_admin.models.staff import Staff
from realty_admin.models.task import Task
from realty_admin.models.performance_log import PerformanceLog
from realty_admin.models.subscription import SubscriptionPlan, UserSubscription
from realty_admin.models.payment import Payment
from realty_admin.models.setting import Setting
from realty_admin.models import events  # noqa: F401

__all__ = [
    'Permission', 'Role', 'Admin', 'User',
    'PropertyCategory', 'PropertyFeature', 'PropertyAmenity', 'Property',
    'Staff', 'Task', 'PerformanceLog',
    'SubscriptionPlan', 'UserSubscription', 'Payment', 'Setting',
    'role_permissions', 'admin_roles', 'admin_permissions',
    'property_features', 'property_amenities',
]
