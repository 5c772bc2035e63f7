"""Per-asset vault run by a guardian.

Depositors receive shares proportional to the assets they bring in. On every
deposit the guardian and the treasury each receive ``shares // guardianAndDaoCut``
carved out of the predicted share total, so the shares minted by one deposit
always add up to ``previewDeposit(assets)``.

Deposited assets are split across legos by the vault's allocation (basis points
per lego, the remainder is held idle). Withdrawals divest only what the idle
balance cannot cover.
"""

from vault_guardians.env import as_address, external
from vault_guardians.constants import HUNDRED_PERCENT, MAX_UINT256, ZERO_ADDRESS
from vault_guardians.errors import (
    AccessDenied,
    DepositExceedsMax,
    InsufficientLiquidity,
    InsufficientShares,
    InvalidAddress,
    InvalidFeeCut,
    VaultInactive,
    ZeroAmount,
    ZeroShares,
)
from vault_guardians.events import (
    AllocationUpdated,
    Deposit,
    Divested,
    FeeSharesMinted,
    Invested,
    VaultDeactivated,
    Withdraw,
)
from vault_guardians.legos.lego import LegoPosition, validate_allocation
from vault_guardians.modules.erc20 import Erc20, check_uint256
from vault_guardians.modules.guards import args, auth, guarded, lifecycle
from vault_guardians.modules.safe_token import safe_transfer, safe_transfer_from


@lifecycle
def when_active(_vault, *args, **kwargs):
    if not _vault._isActive:
        raise VaultInactive


@auth
def only_registry(_vault, *args, **kwargs):
    if _vault.msg_sender != _vault._registry:
        raise AccessDenied("only guardian registry")


@args
def valid_deposit(_vault, _assets, _receiver, *args, **kwargs):
    check_uint256(_assets)
    if _assets == 0:
        raise ZeroAmount("cannot deposit 0 amount")
    receiver = as_address(_receiver)
    if receiver == ZERO_ADDRESS:
        raise InvalidAddress("invalid recipient")
    if _assets > _vault.maxDeposit(receiver):
        raise DepositExceedsMax


@args
def valid_withdraw(_vault, _assets, *args, **kwargs):
    check_uint256(_assets)
    if _assets == 0:
        raise ZeroAmount("cannot withdraw 0 amount")


@args
def valid_redeem(_vault, _shares, *args, **kwargs):
    check_uint256(_shares)
    if _shares == 0:
        raise ZeroAmount("cannot redeem 0 shares")


class VaultShares(Erc20):
    def __init__(
        self,
        env,
        _asset,
        _guardian,
        _treasury,
        _registry,
        _guardianAndDaoCut,
        _legos,
        _allocation,
        label=None,
    ):
        asset = env.at(_asset)
        super().__init__(
            env,
            f"Vault Guardian {asset.name()}",
            f"vg{asset.symbol()}",
            asset.decimals(),
            label,
        )

        if _guardianAndDaoCut <= 2:
            raise InvalidFeeCut
        for addr in (_guardian, _treasury, _registry):
            if as_address(addr) == ZERO_ADDRESS:
                raise InvalidAddress

        self._asset = asset.address
        self._guardian = as_address(_guardian)
        self._treasury = as_address(_treasury)
        self._registry = as_address(_registry)
        self._guardianAndDaoCut = _guardianAndDaoCut
        self._isActive = True

        self.legos = {lego.LEGO_ID: lego for lego in _legos}
        self.positions = {legoId: LegoPosition() for legoId in self.legos}
        self._allocation = validate_allocation(_allocation, self.legos)

    #########
    # Views #
    #########

    def asset(self):
        return self._asset

    def guardian(self):
        return self._guardian

    def treasury(self):
        return self._treasury

    def registry(self):
        return self._registry

    def guardianAndDaoCut(self):
        return self._guardianAndDaoCut

    def isActive(self):
        return self._isActive

    def allocation(self):
        return dict(self._allocation)

    def position(self, _legoId):
        pos = self.positions[_legoId]
        return LegoPosition(pos.receipt, pos.counterpartyDust)

    def idleBalance(self):
        return self.at(self._asset).balanceOf(self)

    def positionValue(self, _legoId):
        return self.legos[_legoId].positionValue(self, self._asset, self.positions[_legoId])

    def totalAssets(self):
        return self.idleBalance() + sum(self.positionValue(legoId) for legoId in self.legos)

    def hasInvestedPositions(self):
        return any(
            self.positions[legoId].receipt != 0 or self.positionValue(legoId) != 0
            for legoId in self.legos
        )

    # share conversion

    def convertToShares(self, _assets):
        supply = self._totalSupply
        if supply == 0:
            return _assets
        totalAssets = self.totalAssets()
        if totalAssets == 0:
            return 0
        return _assets * supply // totalAssets

    def convertToAssets(self, _shares):
        supply = self._totalSupply
        if supply == 0:
            return _shares
        return _shares * self.totalAssets() // supply

    def previewDeposit(self, _assets):
        return self.convertToShares(_assets)

    def previewDepositSplit(self, _assets):
        return self._splitShares(self.previewDeposit(_assets))

    def previewWithdraw(self, _assets):
        supply = self._totalSupply
        totalAssets = self.totalAssets()
        if supply == 0 or totalAssets == 0:
            return _assets
        return -(-_assets * supply // totalAssets)

    def previewRedeem(self, _shares):
        return self.convertToAssets(_shares)

    def maxDeposit(self, _receiver):
        if not self._isActive:
            return 0
        cap = self.at(self._registry).maxDepositAmount(self)
        if cap == 0:
            return MAX_UINT256
        return max(cap - self.totalAssets(), 0)

    def maxWithdraw(self, _owner):
        return self.convertToAssets(self.balanceOf(_owner))

    def maxRedeem(self, _owner):
        return self.balanceOf(_owner)

    ###########
    # Deposit #
    ###########

    @external
    @guarded(when_active, valid_deposit)
    def deposit(self, _assets, _receiver):
        receiver = as_address(_receiver)

        # fees are carved out of the predicted total, never minted on top of it
        totalShares = self.previewDeposit(_assets)
        if totalShares == 0:
            raise ZeroShares
        userShares, guardianFee, treasuryFee = self._splitShares(totalShares)

        depositor = self.msg_sender
        safe_transfer_from(self.at(self._asset), depositor, self.address, _assets, self.address)

        self._mint(receiver, userShares)
        self._mint(self._guardian, guardianFee)
        self._mint(self._treasury, treasuryFee)
        self.log(Deposit(depositor, receiver, _assets, userShares))
        self.log(FeeSharesMinted(self._guardian, guardianFee, self._treasury, treasuryFee))

        self._investFunds(_assets)
        return userShares

    ############
    # Withdraw #
    ############

    @external
    @guarded(valid_withdraw)
    def withdraw(self, _assets, _receiver, _owner):
        shares = self.previewWithdraw(_assets)
        self._settleWithdrawal(_assets, shares, as_address(_receiver), as_address(_owner))
        return shares

    @external
    @guarded(valid_redeem)
    def redeem(self, _shares, _receiver, _owner):
        assets = self.previewRedeem(_shares)
        if assets == 0:
            raise ZeroAmount("nothing to redeem")
        self._settleWithdrawal(assets, _shares, as_address(_receiver), as_address(_owner))
        return assets

    def _settleWithdrawal(self, _assets, _shares, _receiver, _owner):
        if _receiver == ZERO_ADDRESS:
            raise InvalidAddress("invalid recipient")
        if _shares > self.balanceOf(_owner):
            raise InsufficientShares

        caller = self.msg_sender
        if caller != _owner:
            self._spendAllowance(_owner, caller, _shares)

        # divest -> burn -> transfer
        if self.idleBalance() < _assets:
            self._divestFor(_assets)
        if self.idleBalance() < _assets:
            raise InsufficientLiquidity

        self._burn(_owner, _shares)
        safe_transfer(self.at(self._asset), _receiver, _assets, self.address)
        self.log(Withdraw(caller, _receiver, _owner, _assets, _shares))

    ####################
    # Guardian Actions #
    ####################

    @external
    @guarded(when_active, only_registry)
    def setNotActive(self):
        self._isActive = False
        self._divestAll()
        self.log(VaultDeactivated(self.idleBalance()))

    @external
    @guarded(when_active, only_registry)
    def rebalance(self):
        self._divestAll()
        self._investFunds(self.idleBalance())

    @external
    @guarded(when_active, only_registry)
    def updateHoldingAllocation(self, _allocation):
        self._allocation = validate_allocation(_allocation, self.legos)
        self.log(AllocationUpdated(tuple(sorted(self._allocation.items()))))

    ############
    # Internal #
    ############

    def _splitShares(self, _totalShares):
        guardianFee = _totalShares // self._guardianAndDaoCut
        treasuryFee = _totalShares // self._guardianAndDaoCut
        return _totalShares - guardianFee - treasuryFee, guardianFee, treasuryFee

    def _investFunds(self, _assets):
        for legoId, weight in self._allocation.items():
            amount = _assets * weight // HUNDRED_PERCENT
            if amount != 0:
                self._investInLego(legoId, amount)

    def _investInLego(self, _legoId, _amount):
        result = self.legos[_legoId].invest(self, self._asset, _amount)
        position = self.positions[_legoId]
        position.receipt += result.receipt
        position.counterpartyDust += result.counterpartyDust
        self.log(Invested(_legoId, result.assets, result.receipt))

    def _divestFromLego(self, _legoId, _receipt):
        position = self.positions[_legoId]
        result = self.legos[_legoId].divest(self, self._asset, position, _receipt)
        position.receipt -= result.receipt
        position.counterpartyDust -= result.counterpartyDust
        self.log(Divested(_legoId, result.receipt, result.assets))
        return result.assets

    def _divestAll(self):
        for legoId, lego in self.legos.items():
            position = self.positions[legoId]
            receipt = lego.fullReceipt(self, self._asset, position)
            if receipt != 0 or position.counterpartyDust != 0:
                self._divestFromLego(legoId, receipt)

    def _divestFor(self, _assetsNeeded):
        shortfall = _assetsNeeded - self.idleBalance()
        values = {legoId: self.positionValue(legoId) for legoId in self.legos}
        invested = [legoId for legoId, value in values.items() if value != 0]
        totalWeight = sum(self._allocation[legoId] for legoId in invested)

        # first pass: split the shortfall by allocation weight
        if totalWeight != 0:
            for legoId in invested:
                target = min(-(-shortfall * self._allocation[legoId] // totalWeight), values[legoId])
                if target == 0:
                    continue
                position = self.positions[legoId]
                receipt = self.legos[legoId].receiptForValue(self, self._asset, position, target)
                if receipt != 0:
                    self._divestFromLego(legoId, receipt)

        # second pass: drain remaining positions in lego order until covered
        for legoId in invested:
            if self.idleBalance() >= _assetsNeeded:
                break
            lego = self.legos[legoId]
            position = self.positions[legoId]
            receipt = lego.fullReceipt(self, self._asset, position)
            if receipt != 0 or position.counterpartyDust != 0:
                self._divestFromLego(legoId, receipt)
