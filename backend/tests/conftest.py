"""
Pytest fixtures for back office API tests.

Provides an in-memory database, seeded roles/permissions, users with
bearer tokens for each built-in role, and catalog fixtures.
"""

import pytest

from backoffice import create_app
from backoffice.extensions import db
from backoffice.models import User, Product, ProductVariant
from backoffice.permissions import SUPER_ADMIN, ADMIN, CUSTOMER
from backoffice.services.auth_service import hash_password, create_default_roles, assign_role
from backoffice.services import permission_service
from backoffice.services import session_service


PASSWORD = "Password123!"
# Low bcrypt cost keeps fixture setup fast; verification is cost-agnostic.
PASSWORD_HASH = hash_password(PASSWORD, rounds=4)


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def seed(db_session):
    """Built-in roles, the permission catalog, and SuperAdmin links."""
    create_default_roles()
    permission_service.initialize_permissions()
    permission_service.assign_superadmin_permissions()
    db_session.commit()


def make_user(db_session, email: str, full_name: str, role_names=()) -> User:
    user = User(email=email, full_name=full_name, password_hash=PASSWORD_HASH, is_active=True)
    db_session.add(user)
    db_session.commit()
    for role_name in role_names:
        assign_role(user.id, role_name)
    return user


def token_for(user: User) -> str:
    _, token = session_service.create_session(user_id=user.id)
    return token


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def superadmin_user(db_session, seed):
    return make_user(db_session, "root@example.com", "Root User", [SUPER_ADMIN])


@pytest.fixture(scope='function')
def admin_user(db_session, seed):
    return make_user(db_session, "admin@shop.test", "Admin User", [ADMIN])


@pytest.fixture(scope='function')
def customer_user(db_session, seed):
    return make_user(db_session, "shopper@shop.test", "Shopper One", [CUSTOMER])


@pytest.fixture(scope='function')
def other_customer_user(db_session, seed):
    return make_user(db_session, "shopper2@shop.test", "Shopper Two", [CUSTOMER])


@pytest.fixture(scope='function')
def superadmin_headers(superadmin_user):
    return auth_headers(token_for(superadmin_user))


@pytest.fixture(scope='function')
def admin_headers(admin_user):
    return auth_headers(token_for(admin_user))


@pytest.fixture(scope='function')
def customer_headers(customer_user):
    return auth_headers(token_for(customer_user))


@pytest.fixture(scope='function')
def other_customer_headers(other_customer_user):
    return auth_headers(token_for(other_customer_user))


@pytest.fixture(scope='function')
def product(db_session):
    """Product priced at 19.99 with a base image."""
    product = Product(
        name="Linen Shirt",
        sku="SHIRT-001",
        price_cents=1999,
        image_url="https://cdn.example.com/shirt.jpg",
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def variant(db_session, product):
    """Variant that overrides both price (9.99) and image."""
    variant = ProductVariant(
        product_id=product.id,
        sku="SHIRT-001-RED-L",
        attributes='{"Color": "Red", "Size": "Large"}',
        image_url="https://cdn.example.com/shirt-red.jpg",
        price_override_cents=999,
    )
    db_session.add(variant)
    db_session.commit()
    return variant


@pytest.fixture(scope='function')
def plain_variant(db_session, product):
    """Variant with no overrides: inherits the product's price and image."""
    variant = ProductVariant(
        product_id=product.id,
        sku="SHIRT-001-BLUE-M",
        attributes='{"Color": "Blue", "Size": "Medium"}',
        image_url="",
        price_override_cents=None,
    )
    db_session.add(variant)
    db_session.commit()
    return variant
