"""Commerce settings read from the `[custom]` table of the domain configuration."""

from commerce.domain import commerce

DEFAULTS = {
    "FREE_SHIPPING_THRESHOLD": 5000,
    "FLAT_SHIPPING_FEE": 250,
    "ORDER_NUMBER_PREFIX": "YP",
}


def setting(name):
    custom = commerce.config.get("custom") or {}
    return custom.get(name, DEFAULTS[name])


def free_shipping_threshold() -> float:
    return float(setting("FREE_SHIPPING_THRESHOLD"))


def flat_shipping_fee() -> float:
    return float(setting("FLAT_SHIPPING_FEE"))


def order_number_prefix() -> str:
    return str(setting("ORDER_NUMBER_PREFIX"))
