"""SIST-ALICI bakery ERP client layer.

Payment reconciliation, recipe costing, unit conversion and the
remote-data cache contract used by the bakery dashboard.
"""

from .utils.constants import APP_NAME, APP_VERSION

__all__ = ["APP_NAME", "APP_VERSION"]
