"""
Models package.

Domain records parsed from API payloads, plus the SQLAlchemy table that
backs local storage.
"""

from .base import Base, BaseModel
from .storage_entry import StorageEntry
from .ingredient import Ingredient
from .product import Category, Product, Provider
from .recipe import Recipe, RecipeLine, ServerCostLine, ServerRecipeCost, UnitConversion
from .payment import PaymentTender
from .order import Order, OrderDeposit, OrderItem
from .finance import CashMovement, PayrollEntry
from .sale import Sale, SaleItem, WasteItem
from .production import DailyProductionSummary, ProductionLot, ProductionRecord
from .user import SystemConfig, User

__all__ = [
    "Base",
    "BaseModel",
    "StorageEntry",
    "Ingredient",
    "Category",
    "Product",
    "Provider",
    "Recipe",
    "RecipeLine",
    "ServerCostLine",
    "ServerRecipeCost",
    "UnitConversion",
    "PaymentTender",
    "Order",
    "OrderDeposit",
    "OrderItem",
    "CashMovement",
    "PayrollEntry",
    "Sale",
    "SaleItem",
    "WasteItem",
    "DailyProductionSummary",
    "ProductionLot",
    "ProductionRecord",
    "SystemConfig",
    "User",
]
