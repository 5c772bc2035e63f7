from vault_guardians.legos.lego import (
    LENDING_LEGO_ID,
    LIQUIDITY_LEGO_ID,
    Lego,
    LegoPosition,
    LegoResult,
    min_amount_out,
    validate_allocation,
)
from vault_guardians.legos.lending_lego import LendingLego
from vault_guardians.legos.liquidity_lego import LiquidityLego

__all__ = [
    "LENDING_LEGO_ID",
    "LIQUIDITY_LEGO_ID",
    "Lego",
    "LegoPosition",
    "LegoResult",
    "LendingLego",
    "LiquidityLego",
    "min_amount_out",
    "validate_allocation",
]
