"""Keyword-based product category inference.

Products coming from the API carry a free-text name and an optional
category label. The catalog groups them into a fixed set of display
categories by matching keywords against the accent-stripped, lowercased
name first, then the category label.

Examples:
    >>> infer_category_label("Pan Francés")
    'Pan Simple'

    >>> infer_category_label("Tres Leches")
    'Postres'
"""

import re
import unicodedata
from typing import Iterable, List, Optional

from .constants import DEFAULT_PRODUCT_CATEGORY, PRODUCT_CATEGORY_RULES

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def normalize_text(value: Optional[str]) -> str:
    """Lowercase, decompose accents and drop everything but a-z, 0-9 and spaces."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value.lower())
    return _NON_ALNUM.sub("", decomposed).strip()


def infer_category_label(value: Optional[str]) -> Optional[str]:
    """Return the first category whose keywords appear in value, or None."""
    normalized = normalize_text(value)
    if not normalized:
        return None
    for rule in PRODUCT_CATEGORY_RULES:
        if any(keyword in normalized for keyword in rule["keywords"]):
            return rule["label"]
    return None


def get_product_category(product) -> str:
    """
    Display category for a product.

    Args:
        product: Product record (anything with nombre and categoria attributes)

    Returns:
        Category label, or the default label when nothing matches
    """
    for source in (product.nombre, product.categoria):
        label = infer_category_label(source)
        if label:
            return label
    return DEFAULT_PRODUCT_CATEGORY


def get_available_product_categories(products: Iterable) -> List[str]:
    """Sorted, de-duplicated display categories present in products."""
    return sorted({get_product_category(product) for product in products})
