"""Human-readable order numbers: <prefix><YY><MM>-<random digits>, e.g. YP2610-4821.

The random suffix is checked against existing orders before use. After
`MAX_ATTEMPTS` collisions the suffix is widened, so a busy month cannot
exhaust the number space. The `unique` constraint on Order.order_number
still guards against a concurrent writer picking the same number.
"""

import random
from datetime import UTC, datetime

from commerce.settings import order_number_prefix

MAX_ATTEMPTS = 10
SUFFIX_DIGITS = 4


def _candidate(now, digits):
    suffix = random.randint(0, 10**digits - 1)
    return f"{order_number_prefix()}{now:%y%m}-{suffix:0{digits}d}"


def generate_order_number(repository, now=None) -> str:
    """Return an order number not yet used by any order in `repository`."""
    now = now or datetime.now(UTC)
    digits = SUFFIX_DIGITS
    while True:
        for _ in range(MAX_ATTEMPTS):
            candidate = _candidate(now, digits)
            if not repository.number_taken(candidate):
                return candidate
        digits += 2
