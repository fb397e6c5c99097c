"""
Which cached collections each mutation makes stale.

The whole rule set lives in INVALIDATION_RULES so it can be read and
tested in one place. A rule entry is either a fixed key (invalidated as a
prefix) or a Param naming the mutation parameter a key is built from,
e.g. the recipe id for ("recipe-cost", id).

Usage:
    keys_for(Mutation.UPDATE_RECIPE, recipe_id="r1", product_id="p1")
    # [("recetas",), ("recipe-cost", "r1"), ("recipe-by-product", "p1")]
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Tuple, Union

from . import query_keys as keys
from .query_keys import QueryKey


class Mutation(Enum):
    CREATE_INGREDIENT = "create_ingredient"
    UPDATE_INGREDIENT = "update_ingredient"
    DELETE_INGREDIENT = "delete_ingredient"
    REGISTER_PURCHASE = "register_purchase"
    CREATE_PRODUCT = "create_product"
    UPDATE_PRODUCT = "update_product"
    DELETE_PRODUCT = "delete_product"
    CREATE_RECIPE = "create_recipe"
    UPDATE_RECIPE = "update_recipe"
    DELETE_RECIPE = "delete_recipe"
    REGISTER_PRODUCTION = "register_production"
    REGISTER_WASTE = "register_waste"
    CHECKOUT = "checkout"
    CANCEL_SALE = "cancel_sale"
    REGISTER_CASH_MOVEMENT = "register_cash_movement"
    CREATE_PAYROLL = "create_payroll"
    UPDATE_PAYROLL = "update_payroll"
    DELETE_PAYROLL = "delete_payroll"
    CREATE_ORDER = "create_order"
    UPDATE_ORDER = "update_order"
    ADD_DEPOSIT = "add_deposit"
    FINALIZE_ORDER = "finalize_order"
    CREATE_CATEGORY = "create_category"
    UPDATE_CATEGORY = "update_category"
    DELETE_CATEGORY = "delete_category"
    CREATE_PROVIDER = "create_provider"
    UPDATE_PROVIDER = "update_provider"
    DELETE_PROVIDER = "delete_provider"
    CREATE_USER = "create_user"
    DELETE_USER = "delete_user"
    UPDATE_CONFIG = "update_config"


@dataclass(frozen=True)
class Param:
    """Key built from a mutation parameter, e.g. Param(keys.order_detail, "order_id")."""

    build: Callable[..., QueryKey]
    name: str


Rule = Tuple[Union[QueryKey, Param], ...]

# Purchases, ingredient edits and new recipes change server recipe costs,
# so every cached cost goes stale with them
_RECIPE_COSTS: QueryKey = ("recipe-cost",)

_RECIPE_KEYS: Rule = (
    keys.RECIPES,
    Param(keys.recipe_cost, "recipe_id"),
    Param(keys.recipe_by_product, "product_id"),
)
_ORDER_KEYS: Rule = (keys.ORDERS, Param(keys.order_detail, "order_id"))

INVALIDATION_RULES: Dict[Mutation, Rule] = {
    Mutation.CREATE_INGREDIENT: (keys.INGREDIENTS,),
    Mutation.UPDATE_INGREDIENT: (keys.INGREDIENTS, _RECIPE_COSTS),
    Mutation.DELETE_INGREDIENT: (keys.INGREDIENTS,),
    Mutation.REGISTER_PURCHASE: (keys.INGREDIENTS, _RECIPE_COSTS),
    Mutation.CREATE_PRODUCT: (keys.PRODUCTS,),
    Mutation.UPDATE_PRODUCT: (keys.PRODUCTS,),
    Mutation.DELETE_PRODUCT: (keys.PRODUCTS,),
    # The new recipe's id is only known after the write
    Mutation.CREATE_RECIPE: (keys.RECIPES, _RECIPE_COSTS, Param(keys.recipe_by_product, "product_id")),
    Mutation.UPDATE_RECIPE: _RECIPE_KEYS,
    Mutation.DELETE_RECIPE: _RECIPE_KEYS,
    Mutation.REGISTER_PRODUCTION: (keys.PRODUCTS, keys.INGREDIENTS, keys.PRODUCTION_HISTORY),
    Mutation.REGISTER_WASTE: (keys.PRODUCTS, keys.WASTE),
    Mutation.CHECKOUT: (keys.PRODUCTS, keys.SALES),
    Mutation.CANCEL_SALE: (keys.SALES, keys.PRODUCTS),
    # Every filter combination, the displayed one included
    Mutation.REGISTER_CASH_MOVEMENT: (keys.CASH,),
    Mutation.CREATE_PAYROLL: (keys.PAYROLL,),
    Mutation.UPDATE_PAYROLL: (keys.PAYROLL,),
    Mutation.DELETE_PAYROLL: (keys.PAYROLL,),
    Mutation.CREATE_ORDER: (keys.ORDERS,),
    Mutation.UPDATE_ORDER: _ORDER_KEYS,
    Mutation.ADD_DEPOSIT: _ORDER_KEYS,
    Mutation.FINALIZE_ORDER: _ORDER_KEYS,
    Mutation.CREATE_CATEGORY: (keys.INVENTORY_CATEGORIES,),
    Mutation.UPDATE_CATEGORY: (keys.INVENTORY_CATEGORIES,),
    Mutation.DELETE_CATEGORY: (keys.INVENTORY_CATEGORIES,),
    Mutation.CREATE_PROVIDER: (keys.PROVIDERS,),
    Mutation.UPDATE_PROVIDER: (keys.PROVIDERS,),
    Mutation.DELETE_PROVIDER: (keys.PROVIDERS,),
    Mutation.CREATE_USER: (keys.USERS,),
    Mutation.DELETE_USER: (keys.USERS,),
    Mutation.UPDATE_CONFIG: (keys.CONFIG,),
}


def keys_for(mutation: Mutation, **params) -> List[QueryKey]:
    """
    Resolve the keys a mutation invalidates.

    Args:
        mutation: The mutation that succeeded
        **params: Values for the rule's Param entries (recipe_id, product_id,
            order_id)

    Returns:
        Keys in rule order

    Raises:
        ValueError: If a parameter the rule needs is missing or empty
    """
    resolved = []
    for entry in INVALIDATION_RULES[mutation]:
        if isinstance(entry, Param):
            value = params.get(entry.name)
            if value is None or value == "":
                raise ValueError(f"{mutation.value} needs '{entry.name}' to resolve its cache keys")
            resolved.append(entry.build(value))
        else:
            resolved.append(entry)
    return resolved
