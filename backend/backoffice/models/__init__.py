from .auth import User, Role, UserRole, Permission, RolePermission, SessionToken
from .customers import Customer
from .sales import SalesOrder, WALK_IN_CUSTOMER_NAME
from .catalog import Product, ProductVariant
from .wishlist import WishlistItem
from .audit import AuditLog

__all__ = [
    'User', 'Role', 'UserRole', 'Permission', 'RolePermission', 'SessionToken',
    'Customer',
    'SalesOrder', 'WALK_IN_CUSTOMER_NAME',
    'Product', 'ProductVariant',
    'WishlistItem',
    'AuditLog',
]
