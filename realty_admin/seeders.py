"""
Sample data for development databases and the test suite.

``seed_database()`` wipes every table and loads a consistent set of
permissions, roles, accounts, listings, plans, staff and payments.
"""
import logging
from datetime import datetime, date, timedelta

from werkzeug.security import generate_password_hash

from realty_admin.extensions import db
from realty_admin.models import (
    Permission, Role, Admin, User,
    PropertyCategory, PropertyFeature, PropertyAmenity, Property,
    Staff, Task, SubscriptionPlan, UserSubscription, Payment,
)

logger = logging.getLogger(__name__)

ADMIN_PASSWORD = 'admin123'
USER_PASSWORD = 'password123'

PERMISSIONS = [
    ('View Users', 'users', 'read', 'View user list and details'),
    ('Create Users', 'users', 'create', 'Create new users'),
    ('Update Users', 'users', 'update', 'Update user information'),
    ('Delete Users', 'users', 'delete', 'Delete users'),
    ('Manage Users', 'users', 'manage', 'Full user management'),
    ('View Properties', 'properties', 'read', 'View property list and details'),
    ('Create Properties', 'properties', 'create', 'Create new properties'),
    ('Update Properties', 'properties', 'update', 'Update property information'),
    ('Delete Properties', 'properties', 'delete', 'Delete properties'),
    ('Manage Properties', 'properties', 'manage', 'Full property management'),
    ('View Dashboard', 'dashboard', 'read', 'View dashboard and analytics'),
    ('View Staff', 'staff', 'read', 'View staff list and details'),
    ('Create Staff', 'staff', 'create', 'Create new staff members'),
    ('Update Staff', 'staff', 'update', 'Update staff information'),
    ('Delete Staff', 'staff', 'delete', 'Delete staff members'),
    ('Manage Staff', 'staff', 'manage', 'Full staff management'),
    ('View Payments', 'payments', 'read', 'View payment records'),
    ('Update Payments', 'payments', 'update', 'Update payment status'),
    ('Manage Payments', 'payments', 'manage', 'Full payment management'),
    ('View Subscriptions', 'subscriptions', 'read', 'View subscription plans'),
    ('Create Subscriptions', 'subscriptions', 'create', 'Create subscription plans'),
    ('Update Subscriptions', 'subscriptions', 'update', 'Update subscription plans'),
    ('Delete Subscriptions', 'subscriptions', 'delete', 'Delete subscription plans'),
    ('View Settings', 'settings', 'read', 'View system settings'),
    ('Update Settings', 'settings', 'update', 'Update system settings'),
]

USERS = [
    ('John Tenant', 'tenant@example.com', '9876543210', 'tenant', '123 Main Street, Mumbai', date(1990, 1, 15), 'male'),
    ('Sarah Landlord', 'landlord@example.com', '9876543211', 'landlord', '456 Oak Avenue, Delhi', date(1985, 5, 20), 'female'),
    ('Mike Both', 'both@example.com', '9876543212', 'both', '789 Pine Road, Bangalore', date(1988, 10, 10), 'male'),
    ('Lisa Smith', 'lisa@example.com', '9876543213', 'tenant', '321 Elm Street, Chennai', date(1992, 12, 5), 'female'),
    ('David Johnson', 'david@example.com', '9876543214', 'landlord', '654 Maple Drive, Hyderabad', date(1980, 8, 25), 'male'),
]

CATEGORIES = [
    ('Residential', 'residential', 'Residential properties', 'home'),
    ('Commercial', 'commercial', 'Commercial properties', 'building'),
    ('Industrial', 'industrial', 'Industrial properties', 'factory'),
    ('Land/Plot', 'land-plot', 'Land and plot properties', 'map'),
]

FEATURES = [
    ('Parking', 'Dedicated parking space', 'car'),
    ('Garden', 'Private garden area', 'flower'),
    ('Terrace', 'Terrace access', 'sun'),
    ('Basement', 'Basement area', 'arrow-down'),
    ('Fireplace', 'Indoor fireplace', 'fire'),
    ('Study Room', 'Dedicated study room', 'book'),
    ('Store Room', 'Additional storage space', 'box'),
    ('Servant Room', 'Servant quarter', 'user'),
]

AMENITIES = [
    ('Swimming Pool', 'Community swimming pool', 'waves', 'lifestyle'),
    ('Gym', 'Fitness center', 'dumbbell', 'lifestyle'),
    ('Security', '24/7 security', 'shield', 'safety'),
    ('Power Backup', 'Generator backup', 'battery', 'safety'),
    ('Elevator', 'High-speed elevators', 'arrow-up', 'connectivity'),
    ('Parking', 'Covered parking', 'car', 'connectivity'),
    ('Garden', 'Landscaped garden', 'tree-pine', 'lifestyle'),
    ('Club House', 'Community club house', 'users', 'lifestyle'),
    ('Children Play Area', 'Kids play zone', 'baby', 'lifestyle'),
    ('CCTV', 'CCTV surveillance', 'video', 'safety'),
]

PLANS = [
    ('Starter', 999, 5, ['Basic Listings', 'Email Support', 'Standard Profile'], False, 1),
    ('Standard', 1999, 15, ['Featured Listings', 'Priority Support', 'Enhanced Profile', 'Analytics Dashboard'], True, 2),
    ('Priority', 2499, 25, ['Rush Boost', 'Concierge Scheduling', 'Priority Support', 'Advanced Analytics'], False, 3),
    ('Premium', 4999, 50, ['Unlimited Listings', '24/7 Support', 'Premium Profile', 'Marketing Tools', 'API Access'], False, 4),
]


def clear_database():
    """Delete every row, children first."""
    for table in reversed(db.metadata.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()


def seed_permissions():
    permissions = [
        Permission(name=name, module=module, action=action, description=description)
        for name, module, action, description in PERMISSIONS
    ]
    db.session.add_all(permissions)
    db.session.flush()
    return permissions


def seed_roles(permissions):
    def pick(predicate):
        return [p for p in permissions if predicate(p)]

    roles = [
        Role(name='Super Admin', slug='super-admin', description='Full system access',
             permissions=list(permissions)),
        Role(name='Admin', slug='admin', description='Administrative access',
             permissions=pick(lambda p: not p.matches('settings', 'update'))),
        Role(name='Property Manager', slug='property-manager', description='Property management access',
             permissions=pick(lambda p: p.module in ('properties', 'dashboard'))),
        Role(name='User Manager', slug='user-manager', description='User management access',
             permissions=pick(lambda p: p.module in ('users', 'dashboard') and p.action in ('read', 'create', 'update'))),
        Role(name='Staff', slug='staff', description='Basic staff access',
             permissions=pick(lambda p: p.matches('dashboard', 'read'))),
    ]
    db.session.add_all(roles)
    db.session.flush()
    return {role.slug: role for role in roles}


def seed_admins(roles):
    password_hash = generate_password_hash(ADMIN_PASSWORD)
    admins = [
        Admin(name='Super Admin', email='admin@example.com', password_hash=password_hash,
              is_super_admin=True, roles=[roles['super-admin']]),
        Admin(name='John Admin', email='john@sunrise.com', password_hash=password_hash,
              roles=[roles['admin']]),
        Admin(name='Jane Manager', email='jane@sunrise.com', password_hash=password_hash,
              roles=[roles['property-manager']]),
    ]
    db.session.add_all(admins)
    db.session.flush()
    return admins


def seed_users():
    password_hash = generate_password_hash(USER_PASSWORD)
    users = [
        User(name=name, email=email, phone=phone, password_hash=password_hash, user_type=user_type,
             status='active', address=address, dob=dob, gender=gender, is_verified=True)
        for name, email, phone, user_type, address, dob, gender in USERS
    ]
    db.session.add_all(users)
    db.session.flush()
    return users


def seed_taxonomy():
    categories = [
        PropertyCategory(name=name, slug=slug, description=description, icon=icon, sort_order=index)
        for index, (name, slug, description, icon) in enumerate(CATEGORIES, start=1)
    ]
    features = [
        PropertyFeature(name=name, description=description, icon=icon)
        for name, description, icon in FEATURES
    ]
    amenities = [
        PropertyAmenity(name=name, description=description, icon=icon, category=category)
        for name, description, icon, category in AMENITIES
    ]
    db.session.add_all(categories + features + amenities)
    db.session.flush()
    return {c.slug: c for c in categories}, features, amenities


def seed_properties(users, categories, features, amenities, verifier):
    landlords = [u for u in users if u.user_type in ('landlord', 'both')]
    residential = categories['residential']
    commercial = categories['commercial']
    today = datetime.utcnow().date()

    listings = [
        dict(
            title='Luxury 3BHK Apartment in Bandra',
            description='Spacious 3BHK apartment with sea view in the heart of Bandra. Fully furnished with modern amenities.',
            owner=landlords[0], category=residential, property_type='apartment', listing_type='rent',
            monthly_rent=45000, security_deposit=135000, area=1200, bedroom=3, bathroom=2, balcony=2, bhk='3',
            floor_no=8, total_floors=15, furnish_type='furnished', available_from=today,
            city='Mumbai', state='Maharashtra', locality='Bandra West', landmark='Near Bandra Station',
            zipcode='400050', full_address='Sea View Apartments, Bandra West, Mumbai - 400050',
            latitude=19.0596, longitude=72.8295, features=features[0:3], amenities=amenities[0:5],
            is_featured=True, views=150, inquiries=8,
        ),
        dict(
            title='Modern 2BHK Villa in Whitefield',
            description='Beautiful 2BHK villa with garden in prime location of Whitefield, Bangalore.',
            owner=landlords[1], category=residential, property_type='villa', listing_type='both',
            monthly_rent=35000, sale_price=8500000, security_deposit=105000, area=1500, bedroom=2, bathroom=3,
            balcony=1, bhk='2', floor_no=0, total_floors=2, furnish_type='semi-furnished',
            available_from=today + timedelta(days=30),
            city='Bangalore', state='Karnataka', locality='Whitefield', landmark='Near ITPL',
            zipcode='560066', full_address='Green Valley Villa, Whitefield, Bangalore - 560066',
            latitude=12.9698, longitude=77.7500, features=features[1:4], amenities=amenities[2:7],
            is_featured=False, views=89, inquiries=12,
        ),
        dict(
            title='Commercial Office Space in Gurgaon',
            description='Prime office space in Cyber City, Gurgaon. Perfect for IT companies and startups.',
            owner=landlords[0], category=commercial, property_type='office', listing_type='rent',
            monthly_rent=125000, security_deposit=375000, area=2500, bedroom=0, bathroom=4, balcony=0,
            floor_no=12, total_floors=25, furnish_type='unfurnished', available_from=today,
            city='Gurgaon', state='Haryana', locality='Cyber City', landmark='DLF Phase 2',
            zipcode='122002', full_address='Cyber Hub, DLF Cyber City, Gurgaon - 122002',
            latitude=28.4942, longitude=77.0868, features=features[0:2],
            amenities=[a for a in amenities if a.name in ('Security', 'Power Backup', 'Elevator', 'Parking')],
            is_featured=True, views=234, inquiries=15,
        ),
        dict(
            title='Cozy 1BHK Apartment in Koramangala',
            description='Comfortable 1BHK apartment for bachelors in the vibrant area of Koramangala.',
            owner=landlords[1], category=residential, property_type='apartment', listing_type='rent',
            monthly_rent=22000, security_deposit=44000, area=650, bedroom=1, bathroom=1, balcony=1, bhk='1',
            floor_no=3, total_floors=6, furnish_type='semi-furnished', available_for='bachelor',
            available_from=today + timedelta(days=15),
            city='Bangalore', state='Karnataka', locality='Koramangala', landmark='Near Forum Mall',
            zipcode='560034', full_address='Sunrise Apartments, Koramangala, Bangalore - 560034',
            latitude=12.9352, longitude=77.6245, features=features[0:2], amenities=amenities[0:4],
            is_featured=False, views=76, inquiries=5,
        ),
        dict(
            title='4BHK Penthouse for Sale in Andheri',
            description='Luxurious 4BHK penthouse with terrace garden. Premium location with all modern amenities.',
            owner=landlords[0], category=residential, property_type='apartment', listing_type='sale',
            sale_price=25000000, area=2200, bedroom=4, bathroom=4, balcony=3, bhk='4',
            floor_no=20, total_floors=20, furnish_type='furnished', available_from=today,
            city='Mumbai', state='Maharashtra', locality='Andheri West', landmark='Near Metro Station',
            zipcode='400058', full_address='Sky Heights, Andheri West, Mumbai - 400058',
            latitude=19.1136, longitude=72.8697, features=list(features), amenities=list(amenities),
            is_featured=True, views=312, inquiries=23,
        ),
    ]

    properties = []
    for listing in listings:
        properties.append(Property(
            status='published',
            is_verified=True,
            verification_status='approved',
            verified_by=verifier.admin_id,
            verified_at=datetime.utcnow(),
            **listing
        ))
    db.session.add_all(properties)
    db.session.flush()
    return properties


def seed_plans():
    plans = [
        SubscriptionPlan(name=name, price=price, duration_days=30, visit_credits=credits,
                         features=features, status='active', is_popular=is_popular, sort_order=sort_order)
        for name, price, credits, features, is_popular, sort_order in PLANS
    ]
    db.session.add_all(plans)
    db.session.flush()
    return {plan.name: plan for plan in plans}


def seed_staff(roles, properties, creator):
    staff = [
        Staff(name='Alice Staff', email='alice@sunrise.com', phone='9876543220', role_id=roles['staff'].role_id,
              hire_date=date(2024, 1, 15), salary=25000, address='123 Staff Colony, Mumbai'),
        Staff(name='Bob Manager', email='bob@sunrise.com', phone='9876543221',
              role_id=roles['property-manager'].role_id,
              hire_date=date(2023, 11, 1), salary=45000, address='456 Manager Residency, Delhi'),
        Staff(name='Charlie Worker', email='charlie@sunrise.com', phone='9876543222', role_id=roles['staff'].role_id,
              hire_date=date(2024, 2, 1), salary=22000, address='789 Worker Street, Bangalore'),
    ]
    db.session.add_all(staff)
    db.session.flush()

    tasks = [
        Task(staff_id=staff[0].staff_id, property_id=properties[0].property_id, task_type='visit',
             title='Show Bandra apartment to prospective tenant', priority='high', status='pending',
             due_date=datetime.utcnow() + timedelta(days=2), created_by=creator.admin_id),
        Task(staff_id=staff[1].staff_id, property_id=properties[2].property_id, task_type='verification',
             title='Verify documents for Gurgaon office space', priority='medium', status='completed',
             due_date=datetime.utcnow() - timedelta(days=3), completed_at=datetime.utcnow() - timedelta(days=4),
             created_by=creator.admin_id),
    ]
    db.session.add_all(tasks)
    db.session.flush()
    return staff


def seed_payments_and_subscriptions(users, plans, processor):
    tenant, landlord = users[0], users[1]
    now = datetime.utcnow()

    payments = [
        Payment(user_id=tenant.user_id, user_type='tenant', plan_id=plans['Standard'].plan_id,
                amount=plans['Standard'].price, payment_method='razorpay', transaction_id='pay_SEED0001',
                status='completed', processed_by=processor.admin_id, created_at=now - timedelta(days=5)),
        Payment(user_id=landlord.user_id, user_type='landlord', plan_id=plans['Premium'].plan_id,
                amount=plans['Premium'].price, payment_method='stripe', transaction_id='pi_SEED0002',
                status='completed', processed_by=processor.admin_id, created_at=now - timedelta(days=2)),
        Payment(user_id=users[3].user_id, user_type='tenant', plan_id=plans['Starter'].plan_id,
                amount=plans['Starter'].price, payment_method='bank_transfer', status='pending'),
        Payment(user_id=users[4].user_id, user_type='landlord', plan_id=plans['Priority'].plan_id,
                amount=plans['Priority'].price, payment_method='razorpay', transaction_id='pay_SEED0004',
                status='failed', gateway_response={"error": "card_declined"}),
    ]
    db.session.add_all(payments)
    db.session.flush()

    subscriptions = []
    paid = (
        (payments[0], plans['Standard'], now - timedelta(days=5)),
        (payments[1], plans['Premium'], now - timedelta(days=2)),
    )
    for payment, plan, start in paid:
        subscriptions.append(UserSubscription(
            user_id=payment.user_id,
            plan_id=plan.plan_id,
            start_date=start,
            end_date=start + timedelta(days=plan.duration_days),
            status='active',
            remaining_credits=plan.visit_credits,
            total_credits=plan.visit_credits,
            payment_id=payment.payment_id,
        ))
    db.session.add_all(subscriptions)
    db.session.flush()
    return payments, subscriptions


def seed_database():
    """Reset all tables and load the sample data set. Returns row counts per entity."""
    clear_database()

    permissions = seed_permissions()
    roles = seed_roles(permissions)
    admins = seed_admins(roles)
    users = seed_users()
    categories, features, amenities = seed_taxonomy()
    properties = seed_properties(users, categories, features, amenities, verifier=admins[0])
    plans = seed_plans()
    staff = seed_staff(roles, properties, creator=admins[0])
    payments, subscriptions = seed_payments_and_subscriptions(users, plans, processor=admins[0])
    db.session.commit()

    summary = {
        "permissions": len(permissions),
        "roles": len(roles),
        "admins": len(admins),
        "users": len(users),
        "property_categories": len(categories),
        "property_features": len(features),
        "property_amenities": len(amenities),
        "properties": len(properties),
        "subscription_plans": len(plans),
        "user_subscriptions": len(subscriptions),
        "payments": len(payments),
        "staff": len(staff),
    }
    logger.info("Database seeded: %s", summary)
    return summary
