"""Guardian registry.

Guardians stake the base asset to run vaults. Every guardian needs a
base-asset vault before running vaults for other supported assets, and runs
at most one vault per asset. The owner (the DAO) sets the stake price, the fee
cut new vaults snapshot, and per-vault deposit caps.
"""

from dataclasses import dataclass, field

from vault_guardians.env import as_address, external
from vault_guardians.constants import ZERO_ADDRESS
from vault_guardians.errors import (
    AccessDenied,
    CannotQuitWithActivePositions,
    GuardianAlreadyExists,
    InvalidAddress,
    InvalidFeeCut,
    NotBaseGuardian,
    NothingToSweep,
    StakeTooLow,
    UnsupportedAsset,
    ZeroAmount,
)
from vault_guardians.events import (
    GuardianAdded,
    GuardianAndDaoCutUpdated,
    GuardianQuit,
    GuardianStakePriceUpdated,
    MaxDepositAmountSet,
    TokensSwept,
)
from vault_guardians.legos.lego import validate_allocation
from vault_guardians.modules.erc20 import check_uint256
from vault_guardians.modules.guards import args, auth, guarded, only_owner
from vault_guardians.modules.ownership import Ownership
from vault_guardians.modules.safe_token import safe_transfer, safe_transfer_from
from vault_guardians.vaults.vault_shares import VaultShares


@dataclass
class GuardianData:
    stakedAmount: int = 0
    vaults: dict = field(default_factory=dict)  # asset -> vault
    stakes: dict = field(default_factory=dict)  # asset -> stake posted for that vault


@auth
def only_guardian(_registry, *args, **kwargs):
    if _registry.msg_sender not in _registry._guardians:
        raise AccessDenied("not a guardian")


@args
def valid_stake(_registry, _asset, _stakeAmount, *args, **kwargs):
    if as_address(_asset) not in _registry._supportedAssets:
        raise UnsupportedAsset
    check_uint256(_stakeAmount)
    if _stakeAmount < _registry._guardianStakePrice:
        raise StakeTooLow


@args
def valid_stake_price(_registry, _newPrice, *args, **kwargs):
    check_uint256(_newPrice)
    if _newPrice == 0:
        raise ZeroAmount("invalid stake price")


@args
def valid_fee_cut(_registry, _newCut, *args, **kwargs):
    check_uint256(_newCut)
    if _newCut <= 2:
        raise InvalidFeeCut


@args
def valid_deposit_cap(_registry, _vault, _amount, *args, **kwargs):
    if as_address(_vault) not in _registry._vaults:
        raise InvalidAddress("unknown vault")
    check_uint256(_amount)


class GuardianRegistry(Ownership):
    def __init__(
        self,
        env,
        _owner,
        _treasury,
        _baseAsset,
        _supportedAssets,
        _legos,
        _guardianStakePrice,
        _guardianAndDaoCut,
        _defaultAllocation,
        label=None,
    ):
        super().__init__(env, _owner, label)

        check_uint256(_guardianAndDaoCut)
        check_uint256(_guardianStakePrice)
        if _guardianAndDaoCut <= 2:
            raise InvalidFeeCut
        if _guardianStakePrice == 0:
            raise ZeroAmount("invalid stake price")

        self._treasury = as_address(_treasury)
        if self._treasury == ZERO_ADDRESS:
            raise InvalidAddress("invalid treasury")

        self._baseAsset = as_address(_baseAsset)
        self._supportedAssets = [self._baseAsset]
        for asset in _supportedAssets:
            asset = as_address(asset)
            if asset not in self._supportedAssets:
                self._supportedAssets.append(asset)

        self._legos = list(_legos)
        self._guardianStakePrice = _guardianStakePrice
        self._guardianAndDaoCut = _guardianAndDaoCut
        self._defaultAllocation = validate_allocation(_defaultAllocation, [lego.LEGO_ID for lego in self._legos])

        self._guardians = {}
        self._vaults = {}  # vault -> guardian
        self._maxDepositAmounts = {}
        self._totalStaked = 0

    #########
    # Views #
    #########

    def treasury(self):
        return self._treasury

    def baseAsset(self):
        return self._baseAsset

    def supportedAssets(self):
        return list(self._supportedAssets)

    def isSupportedAsset(self, _asset):
        return as_address(_asset) in self._supportedAssets

    def legos(self):
        return list(self._legos)

    def defaultAllocation(self):
        return dict(self._defaultAllocation)

    def guardianStakePrice(self):
        return self._guardianStakePrice

    def guardianAndDaoCut(self):
        return self._guardianAndDaoCut

    def isGuardian(self, _user):
        return as_address(_user) in self._guardians

    def guardianStake(self, _guardian):
        data = self._guardians.get(as_address(_guardian))
        return data.stakedAmount if data else 0

    def guardianVault(self, _guardian, _asset):
        data = self._guardians.get(as_address(_guardian))
        if data is None:
            return ZERO_ADDRESS
        return data.vaults.get(as_address(_asset), ZERO_ADDRESS)

    def guardianVaults(self, _guardian):
        data = self._guardians.get(as_address(_guardian))
        return dict(data.vaults) if data else {}

    def isVault(self, _vault):
        return as_address(_vault) in self._vaults

    def totalStaked(self):
        return self._totalStaked

    def maxDepositAmount(self, _vault):
        return self._maxDepositAmounts.get(as_address(_vault), 0)

    ############
    # Guardian #
    ############

    @external
    @guarded(valid_stake)
    def becomeGuardian(self, _asset, _stakeAmount, _allocation=None):
        asset = as_address(_asset)
        guardian = self.msg_sender

        data = self._guardians.get(guardian)
        if data is not None and asset in data.vaults:
            raise GuardianAlreadyExists
        if asset != self._baseAsset and (data is None or self._baseAsset not in data.vaults):
            raise NotBaseGuardian

        allocation = self._defaultAllocation if _allocation is None else _allocation
        safe_transfer_from(self.at(self._baseAsset), guardian, self.address, _stakeAmount, self.address)

        token = self.at(asset)
        vault = VaultShares(
            self.env,
            asset,
            guardian,
            self._treasury,
            self.address,
            self._guardianAndDaoCut,
            self._legos,
            allocation,
            label=f"vg{token.symbol()}-{guardian[2:8]}",
        )

        if data is None:
            data = GuardianData()
            self._guardians[guardian] = data
        data.vaults[asset] = vault.address
        data.stakes[asset] = _stakeAmount
        data.stakedAmount += _stakeAmount
        self._vaults[vault.address] = guardian
        self._totalStaked += _stakeAmount

        self.log(GuardianAdded(guardian, asset, vault.address, _stakeAmount))
        return vault.address

    @external
    @guarded(only_guardian)
    def quitTokenGuardian(self, _asset):
        asset = as_address(_asset)
        guardian = self.msg_sender
        if asset == self._baseAsset:
            raise AccessDenied("use quitGuardian for base asset")

        data = self._guardians[guardian]
        if asset not in data.vaults:
            raise AccessDenied("not guardian for asset")

        stake = self._releaseVault(guardian, data, asset)
        safe_transfer(self.at(self._baseAsset), guardian, stake, self.address)
        return stake

    @external
    @guarded(only_guardian)
    def quitGuardian(self):
        guardian = self.msg_sender
        data = self._guardians[guardian]

        # token vaults must be wound down by their guardian first
        for asset, vaultAddr in data.vaults.items():
            if asset == self._baseAsset:
                continue
            vault = self.at(vaultAddr)
            if vault.isActive() and vault.hasInvestedPositions():
                raise CannotQuitWithActivePositions

        totalStake = 0
        for asset in list(data.vaults):
            totalStake += self._releaseVault(guardian, data, asset)

        del self._guardians[guardian]
        safe_transfer(self.at(self._baseAsset), guardian, totalStake, self.address)
        return totalStake

    @external
    @guarded(only_guardian)
    def updateHoldingAllocation(self, _asset, _allocation):
        self.at(self._ownedVault(_asset)).updateHoldingAllocation(_allocation)

    @external
    @guarded(only_guardian)
    def rebalanceVault(self, _asset):
        self.at(self._ownedVault(_asset)).rebalance()

    #########
    # Admin #
    #########

    @external
    @guarded(only_owner, valid_stake_price)
    def updateGuardianStakePrice(self, _newPrice):
        oldPrice = self._guardianStakePrice
        self._guardianStakePrice = _newPrice
        self.log(GuardianStakePriceUpdated(oldPrice, _newPrice))

    @external
    @guarded(only_owner, valid_fee_cut)
    def updateGuardianAndDaoCut(self, _newCut):
        oldCut = self._guardianAndDaoCut
        self._guardianAndDaoCut = _newCut
        self.log(GuardianAndDaoCutUpdated(oldCut, _newCut))

    @external
    @guarded(only_owner, valid_deposit_cap)
    def setMaxDepositAmount(self, _vault, _amount):
        vault = as_address(_vault)
        self._maxDepositAmounts[vault] = _amount
        self.log(MaxDepositAmountSet(vault, _amount))

    @external
    @guarded(only_owner)
    def updateDefaultAllocation(self, _allocation):
        self._defaultAllocation = validate_allocation(_allocation, [lego.LEGO_ID for lego in self._legos])

    @external
    @guarded(only_owner)
    def sweepExcessToken(self, _token):
        token = self.at(_token)
        balance = token.balanceOf(self)
        if token.address == self._baseAsset:
            balance -= self._totalStaked

        if balance <= 0:
            raise NothingToSweep
        safe_transfer(token, self._owner, balance, self.address)
        self.log(TokensSwept(token.address, balance))
        return balance

    ############
    # Internal #
    ############

    def _ownedVault(self, _asset):
        vault = self.guardianVault(self.msg_sender, _asset)
        if vault == ZERO_ADDRESS:
            raise AccessDenied("not guardian for asset")
        return vault

    def _releaseVault(self, _guardian, _data, _asset):
        vaultAddr = _data.vaults.pop(_asset)
        stake = _data.stakes.pop(_asset)
        vault = self.at(vaultAddr)
        if vault.isActive():
            vault.setNotActive()

        _data.stakedAmount -= stake
        self._totalStaked -= stake
        self.log(GuardianQuit(_guardian, _asset, stake))
        return stake
