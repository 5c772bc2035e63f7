from dataclasses import dataclass

from vault_guardians.constants import HUNDRED_PERCENT
from vault_guardians.errors import InvalidAllocation


LIQUIDITY_LEGO_ID = 1
LENDING_LEGO_ID = 2


@dataclass
class LegoPosition:
    """Accounting entry a vault keeps for one lego."""

    receipt: int = 0
    counterpartyDust: int = 0

    def isEmpty(self):
        return self.receipt == 0 and self.counterpartyDust == 0


@dataclass(frozen=True)
class LegoResult:
    # invest: asset amount consumed, receipt minted, counterparty dust left over
    # divest: asset amount returned, receipt burned, counterparty dust consumed
    assets: int = 0
    receipt: int = 0
    counterpartyDust: int = 0


def min_amount_out(_expected, _slippageTolerance):
    """Lowest acceptable output for an expected amount.

    Never zero while the expected output is positive.
    """
    if _expected == 0:
        return 0
    return max(_expected * (HUNDRED_PERCENT - _slippageTolerance) // HUNDRED_PERCENT, 1)


class Lego:
    """Moves vault funds into and out of one external market.

    Legos only hold configuration. Every call runs on behalf of the vault it is
    handed and returns what changed; the vault owns the resulting position.
    """

    LEGO_ID = 0

    def invest(self, _vault, _asset, _amount):
        raise NotImplementedError

    def divest(self, _vault, _asset, _position, _receipt):
        raise NotImplementedError

    def positionValue(self, _vault, _asset, _position):
        raise NotImplementedError

    def fullReceipt(self, _vault, _asset, _position):
        raise NotImplementedError

    def receiptForValue(self, _vault, _asset, _position, _value):
        raise NotImplementedError


def validate_allocation(_allocation, _legoIds):
    allocation = {legoId: 0 for legoId in _legoIds}
    for legoId, weight in dict(_allocation).items():
        if legoId not in allocation:
            raise InvalidAllocation(f"unknown lego id {legoId}")
        if not isinstance(weight, int) or weight < 0:
            raise InvalidAllocation(f"invalid weight for lego {legoId}")
        allocation[legoId] = weight

    if sum(allocation.values()) > HUNDRED_PERCENT:
        raise InvalidAllocation("allocation exceeds 100%")
    return allocation
