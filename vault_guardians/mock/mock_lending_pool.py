"""Lending market whose receipt tokens track a growing liquidity index."""

from vault_guardians.env import Contract, as_address, external
from vault_guardians.constants import HUNDRED_PERCENT, MAX_UINT256, RAY, ZERO_ADDRESS
from vault_guardians.errors import (
    AccessDenied,
    InsufficientBalance,
    InsufficientLiquidity,
    UnsupportedAsset,
    ZeroAmount,
)
from vault_guardians.events import Transfer
from vault_guardians.modules.erc20 import Erc20, check_uint256


class MockReceiptToken(Erc20):
    """Interest-bearing receipt. Balances are stored scaled by the pool's index."""

    def __init__(self, env, _pool, _underlying, label=None):
        underlying = env.at(_underlying)
        super().__init__(env, f"Lent {underlying.name()}", f"l{underlying.symbol()}", underlying.decimals(), label)
        self._pool = as_address(_pool)
        self._underlying = underlying.address
        self._index = RAY

    def underlying(self):
        return self._underlying

    def index(self):
        return self._index

    def scaledBalanceOf(self, _user):
        return self._balances.get(as_address(_user), 0)

    def balanceOf(self, _user):
        return self.scaledBalanceOf(_user) * self._index // RAY

    def totalSupply(self):
        return self._totalSupply * self._index // RAY

    @external
    def transfer(self, _recipient, _amount):
        self._transfer(self.msg_sender, as_address(_recipient), self._toScaled(_amount))
        return True

    @external
    def transferFrom(self, _sender, _recipient, _amount):
        sender = as_address(_sender)
        self._spendAllowance(sender, self.msg_sender, _amount)
        self._transfer(sender, as_address(_recipient), self._toScaled(_amount))
        return True

    # pool only

    def _onlyPool(self):
        if self.msg_sender != self._pool:
            raise AccessDenied("only pool")

    @external
    def mintScaled(self, _recipient, _amount):
        self._onlyPool()
        self._mint(as_address(_recipient), self._toScaled(_amount))

    @external
    def burnScaled(self, _owner, _amount):
        self._onlyPool()
        owner = as_address(_owner)
        check_uint256(_amount)
        scaled = min(-(-_amount * RAY // self._index), self.scaledBalanceOf(owner))
        self._balances[owner] -= scaled
        self._totalSupply -= scaled
        self.log(Transfer(owner, ZERO_ADDRESS, _amount))

    @external
    def setIndex(self, _index):
        self._onlyPool()
        self._index = _index

    def _toScaled(self, _amount):
        check_uint256(_amount)
        return _amount * RAY // self._index


class MockLendingPool(Contract):
    def __init__(self, env, label=None):
        super().__init__(env, label)
        self._receiptTokens = {}
        self._withdrawShortfallBps = 0

    @external
    def initReserve(self, _asset):
        asset = as_address(_asset)
        if asset in self._receiptTokens:
            return self._receiptTokens[asset]
        receiptToken = MockReceiptToken(self.env, self.address, asset)
        self._receiptTokens[asset] = receiptToken.address
        return receiptToken.address

    @external
    def setWithdrawShortfall(self, _bps):
        # pool pays back less than requested, like a market with frozen liquidity
        self._withdrawShortfallBps = _bps

    def getReceiptToken(self, _asset):
        asset = as_address(_asset)
        if asset not in self._receiptTokens:
            raise UnsupportedAsset(f"no reserve for {asset}")
        return self._receiptTokens[asset]

    @external
    def supply(self, _asset, _amount, _onBehalfOf, _referralCode):
        if _amount == 0:
            raise ZeroAmount
        receiptToken = self.at(self.getReceiptToken(_asset))
        self.at(_asset).transferFrom(self.msg_sender, self.address, _amount)
        receiptToken.mintScaled(_onBehalfOf, _amount)

    @external
    def withdraw(self, _asset, _amount, _to):
        receiptToken = self.at(self.getReceiptToken(_asset))
        sender = self.msg_sender
        balance = receiptToken.balanceOf(sender)

        amount = balance if _amount == MAX_UINT256 else _amount
        if amount == 0:
            raise ZeroAmount
        if amount > balance:
            raise InsufficientBalance("not enough supplied")

        asset = self.at(_asset)
        paid = amount * (HUNDRED_PERCENT - self._withdrawShortfallBps) // HUNDRED_PERCENT
        if paid > asset.balanceOf(self):
            raise InsufficientLiquidity("pool has no liquidity")

        receiptToken.burnScaled(sender, amount)
        asset.transfer(_to, paid)
        return paid

    @external
    def accrueYield(self, _asset, _amount):
        """Pay ``_amount`` of interest to every supplier of ``_asset``, pro rata."""
        receiptToken = self.at(self.getReceiptToken(_asset))
        totalLent = receiptToken.totalSupply()
        if totalLent == 0:
            raise ZeroAmount("nothing lent")

        self.at(_asset).transferFrom(self.msg_sender, self.address, _amount)
        receiptToken.setIndex(receiptToken.index() * (totalLent + _amount) // totalLent)
