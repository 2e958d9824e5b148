"""
Database models
All SQLAlchemy models should be defined here or imported here
"""

# Import Base for models to inherit from
from app.core.database import Base
from app.models.catalog import Category, Product, Subcategory, Tag
from app.models.customer import Address, Customer, CustomerStatus
from app.models.order import Order, PaymentStatus

# Export all models for easy imports
__all__ = [
    "Address",
    "Base",
    "Category",
    "Customer",
    "CustomerStatus",
    "Order",
    "PaymentStatus",
    "Product",
    "Subcategory",
    "Tag",
]
