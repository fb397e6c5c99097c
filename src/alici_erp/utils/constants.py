"""
Constants and enumerations for the ALICI ERP client.

This module defines all system-wide constants including:
- Application metadata
- Currencies and money precision
- User roles and resource enumerations (cash, orders, payroll, categories)
- API paths and local storage keys
- User-facing messages
"""

from decimal import Decimal
from typing import Dict, List

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "SIST-ALICI ERP"
APP_VERSION = "0.1.0"
STORAGE_DATABASE_FILENAME = "alici_erp_storage.db"

# ============================================================================
# API
# ============================================================================

DEFAULT_API_URL = "https://sist-alici.vercel.app"
API_PREFIX = "/api"

DEFAULT_REQUEST_TIMEOUT = 15  # seconds
DEFAULT_REQUEST_RETRIES = 3
DEFAULT_RETRY_BACKOFF = 0.5

# Local storage key holding the bearer token
TOKEN_STORAGE_KEY = "token"

# ============================================================================
# Currencies
# ============================================================================

PRIMARY_CURRENCY = "NIO"  # Cordoba, accounting currency
SECONDARY_CURRENCY = "USD"
CURRENCIES: List[str] = [PRIMARY_CURRENCY, SECONDARY_CURRENCY]

CURRENCY_SYMBOLS: Dict[str, str] = {
    PRIMARY_CURRENCY: "C$",
    SECONDARY_CURRENCY: "$",
}

# Money quantization
CENTS = Decimal("0.01")
CENTS_PER_UNIT = Decimal("100")
ZERO = Decimal("0")

# ============================================================================
# Roles
# ============================================================================

ROLE_ADMIN = "ADMIN"
ROLE_BAKER = "PANADERO"
ROLE_CASHIER = "CAJERO"
USER_ROLES: List[str] = [ROLE_ADMIN, ROLE_BAKER, ROLE_CASHIER]

# ============================================================================
# Resource enumerations
# ============================================================================

CASH_INCOME = "INGRESO"
CASH_EXPENSE = "EGRESO"
CASH_TYPES: List[str] = [CASH_INCOME, CASH_EXPENSE]

# Filter value meaning "no filter" in list screens
ALL_FILTER = "TODOS"

ORDER_PENDING = "PENDIENTE"
ORDER_DELIVERED = "ENTREGADO"
ORDER_CANCELLED = "CANCELADO"
ORDER_STATUSES: List[str] = [ORDER_PENDING, ORDER_DELIVERED, ORDER_CANCELLED]

# Days before delivery when a pending order is flagged as upcoming
ORDER_UPCOMING_DAYS = 2

DEPOSIT_METHODS: List[str] = ["EFECTIVO", "TRANSFERENCIA", "TARJETA"]

CATEGORY_PRODUCTION = "PRODUCCION"
CATEGORY_RESALE = "REVENTA"
CATEGORY_TYPES: List[str] = [CATEGORY_PRODUCTION, CATEGORY_RESALE]

PAYROLL_FORTNIGHTS: List[int] = [1, 2]

SALE_COMPLETE = "COMPLETA"
SALE_VOIDED = "ANULADA"

# ============================================================================
# Product categories (keyword inference)
# ============================================================================

DEFAULT_PRODUCT_CATEGORY = "Sin categoría"

PRODUCT_CATEGORY_RULES: List[Dict] = [
    {
        "label": "Pan Simple",
        "keywords": [
            "pan simple",
            "pan salado",
            "baguette",
            "baguete",
            "bagette",
            "pan frances",
            "bolillo",
            "telera",
            "pan campesino",
            "pan integral",
            "pan rustico",
        ],
    },
    {
        "label": "Pan Dulce",
        "keywords": [
            "pan dulce",
            "concha",
            "cinnamon",
            "rol",
            "role",
            "danes",
            "empanada",
            "donut",
            "donas",
            "mantecada",
            "cachito",
            "bolleria",
            "croissant",
            "cuernito",
            "palmera",
            "hojaldre",
            "trenza",
            "ensaimada",
        ],
    },
    {
        "label": "Postres",
        "keywords": [
            "postre",
            "flan",
            "gelatina",
            "mousse",
            "tres leches",
            "pay",
            "brownie",
            "cupcake",
            "galleta",
        ],
    },
    {
        "label": "Tortas",
        "keywords": ["torta", "pastel", "cake", "cheesecake", "tarta"],
    },
]

# ============================================================================
# Messages
# ============================================================================

ERROR_REQUIRED_FIELD = "Este campo es obligatorio"
ERROR_INVALID_NUMBER = "Debe ser un número válido"
ERROR_INVALID_POSITIVE = "Debe ser mayor a cero"
ERROR_INVALID_NON_NEGATIVE = "Debe ser mayor o igual a cero"

GENERIC_ERROR_MESSAGE = "Ocurrió un error inesperado"
