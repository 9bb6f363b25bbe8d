# Overview: Built-in role names and their descriptions.

SUPER_ADMIN = "SuperAdmin"
ADMIN = "Admin"
CUSTOMER = "Customer"

DEFAULT_ROLES = {
    SUPER_ADMIN: "Super Administrator with full system access including role and permission management",
    ADMIN: "Administrator with full system access for managing products, categories, and orders",
    CUSTOMER: "Customer role for browsing products and placing orders",
}
