import pytest

from config.BluePrint import PARAMS
from constants import EIGHTEEN_DECIMALS, LENDING_LEGO_ID, LIQUIDITY_LEGO_ID, ZERO_ADDRESS
from conf_utils import filter_logs
from vault_guardians.errors import (
    AccessDenied,
    CannotQuitWithActivePositions,
    GuardianAlreadyExists,
    InvalidAddress,
    InvalidAllocation,
    InvalidAmount,
    InvalidFeeCut,
    NotBaseGuardian,
    NothingToSweep,
    StakeTooLow,
    UnsupportedAsset,
    ZeroAmount,
)
from vault_guardians.modules.guards import ARGS, AUTH
from vault_guardians.registries import GuardianRegistry


STAKE_PRICE = PARAMS["local"]["GUARDIAN_STAKE_PRICE"]


##############
# Deployment #
##############


def test_registry_deploy(guardian_registry, governance, treasury, weth, usdc, link):
    assert guardian_registry.owner() == governance
    assert guardian_registry.treasury() == treasury
    assert guardian_registry.baseAsset() == weth.address
    assert guardian_registry.supportedAssets() == [weth.address, usdc.address, link.address]
    assert guardian_registry.guardianStakePrice() == STAKE_PRICE
    assert guardian_registry.guardianAndDaoCut() == PARAMS["local"]["GUARDIAN_AND_DAO_CUT"]
    assert guardian_registry.defaultAllocation() == PARAMS["local"]["DEFAULT_ALLOCATION"]
    assert guardian_registry.totalStaked() == 0


def test_registry_deploy_validation(createRegistry):
    with pytest.raises(InvalidFeeCut):
        createRegistry(_guardianAndDaoCut=2)

    with pytest.raises(ZeroAmount):
        createRegistry(_guardianStakePrice=0)

    with pytest.raises(InvalidAddress):
        createRegistry(_treasury=ZERO_ADDRESS)

    with pytest.raises(InvalidAllocation):
        createRegistry(_defaultAllocation={LIQUIDITY_LEGO_ID: 60_00, LENDING_LEGO_ID: 60_00})


##############
# Onboarding #
##############


def test_become_guardian(guardian_registry, becomeGuardian, weth, sally, governance):
    vault = becomeGuardian(sally, weth)

    assert guardian_registry.isGuardian(sally)
    assert guardian_registry.isVault(vault)
    assert guardian_registry.guardianVault(sally, weth) == vault.address
    assert guardian_registry.guardianStake(sally) == STAKE_PRICE
    assert guardian_registry.totalStaked() == STAKE_PRICE
    assert weth.balanceOf(guardian_registry) == STAKE_PRICE
    assert weth.balanceOf(sally) == 0

    assert vault.asset() == weth.address
    assert vault.guardian() == sally
    assert vault.registry() == guardian_registry.address
    assert vault.isActive()
    assert vault.allocation() == PARAMS["local"]["DEFAULT_ALLOCATION"]

    log = filter_logs(guardian_registry, "GuardianAdded")[0]
    assert log.guardian == sally
    assert log.asset == weth.address
    assert log.vault == vault.address
    assert log.stake == STAKE_PRICE


def test_become_token_guardian(guardian_registry, weth_vault, becomeGuardian, usdc, sally):
    vault = becomeGuardian(sally, usdc, {LENDING_LEGO_ID: 50_00})

    assert guardian_registry.guardianVaults(sally) == {
        guardian_registry.baseAsset(): weth_vault.address,
        usdc.address: vault.address,
    }
    # token vaults are staked in the base asset too
    assert guardian_registry.guardianStake(sally) == 2 * STAKE_PRICE
    assert vault.allocation() == {LIQUIDITY_LEGO_ID: 0, LENDING_LEGO_ID: 50_00}


def test_become_guardian_validation(guardian_registry, becomeGuardian, weth_vault, createToken, weth, usdc, sally, bob):
    with pytest.raises(UnsupportedAsset):
        becomeGuardian(bob, createToken("NOPE"))

    with pytest.raises(StakeTooLow):
        becomeGuardian(bob, weth, _stake=STAKE_PRICE - 1)

    with pytest.raises(GuardianAlreadyExists):
        becomeGuardian(sally, weth)

    with pytest.raises(NotBaseGuardian):
        becomeGuardian(bob, usdc)

    with pytest.raises(InvalidAllocation):
        becomeGuardian(bob, weth, {99: 1})

    assert not guardian_registry.isGuardian(bob)
    assert guardian_registry.totalStaked() == STAKE_PRICE


def test_stake_above_price_is_recorded(guardian_registry, becomeGuardian, weth, bob):
    becomeGuardian(bob, weth, _stake=3 * STAKE_PRICE)
    assert guardian_registry.guardianStake(bob) == 3 * STAKE_PRICE
    assert guardian_registry.totalStaked() == 3 * STAKE_PRICE


def test_vault_snapshots_fee_cut(guardian_registry, weth_vault, becomeGuardian, usdc, sally, governance):
    guardian_registry.updateGuardianAndDaoCut(20, sender=governance)

    assert weth_vault.guardianAndDaoCut() == PARAMS["local"]["GUARDIAN_AND_DAO_CUT"]
    vault = becomeGuardian(sally, usdc)
    assert vault.guardianAndDaoCut() == 20


############
# Quitting #
############


def test_quit_token_guardian(guardian_registry, link_vault, depositInto, weth, link, sally, bob):
    depositInto(link_vault, bob, 100 * EIGHTEEN_DECIMALS)

    assert guardian_registry.quitTokenGuardian(link, sender=sally) == STAKE_PRICE
    assert weth.balanceOf(sally) == STAKE_PRICE
    assert guardian_registry.guardianStake(sally) == STAKE_PRICE
    assert guardian_registry.guardianVault(sally, link) == ZERO_ADDRESS
    assert guardian_registry.totalStaked() == STAKE_PRICE
    assert not link_vault.isActive()
    assert not link_vault.hasInvestedPositions()

    log = filter_logs(guardian_registry, "GuardianQuit")[0]
    assert log.guardian == sally
    assert log.asset == link.address
    assert log.stakeReturned == STAKE_PRICE


def test_quit_token_guardian_validation(guardian_registry, weth_vault, weth, usdc, sally, bob):
    with pytest.raises(AccessDenied, match="quitGuardian"):
        guardian_registry.quitTokenGuardian(weth, sender=sally)

    with pytest.raises(AccessDenied, match="not guardian for asset"):
        guardian_registry.quitTokenGuardian(usdc, sender=sally)

    with pytest.raises(AccessDenied, match="not a guardian"):
        guardian_registry.quitTokenGuardian(usdc, sender=bob)


def test_quit_guardian_blocked_by_invested_token_vault(guardian_registry, link_vault, depositInto, link, sally, bob):
    depositInto(link_vault, bob, 100 * EIGHTEEN_DECIMALS)

    with pytest.raises(CannotQuitWithActivePositions):
        guardian_registry.quitGuardian(sender=sally)
    assert guardian_registry.isGuardian(sally)
    assert link_vault.isActive()

    # wind down the token vault first
    guardian_registry.quitTokenGuardian(link, sender=sally)
    assert guardian_registry.quitGuardian(sender=sally) == STAKE_PRICE


def test_quit_guardian(guardian_registry, weth_vault, link_vault, depositInto, weth, sally, bob):
    # an invested base vault does not block quitting
    depositInto(weth_vault, bob, 10 * EIGHTEEN_DECIMALS)
    assert weth_vault.hasInvestedPositions()

    assert guardian_registry.quitGuardian(sender=sally) == 2 * STAKE_PRICE
    assert weth.balanceOf(sally) == 2 * STAKE_PRICE

    assert not guardian_registry.isGuardian(sally)
    assert guardian_registry.guardianVaults(sally) == {}
    assert guardian_registry.totalStaked() == 0
    assert weth.balanceOf(guardian_registry) == 0

    for vault in (weth_vault, link_vault):
        assert not vault.isActive()
        assert not vault.hasInvestedPositions()
    assert len(filter_logs(guardian_registry, "GuardianQuit")) == 2

    # depositors can still leave
    shares = weth_vault.balanceOf(bob)
    assert weth_vault.redeem(shares, bob, bob, sender=bob) > 0


def test_quit_guardian_not_guardian(guardian_registry, bob):
    with pytest.raises(AccessDenied, match="not a guardian"):
        guardian_registry.quitGuardian(sender=bob)


def test_guardian_can_return(guardian_registry, weth_vault, becomeGuardian, weth, sally):
    guardian_registry.quitGuardian(sender=sally)

    vault = becomeGuardian(sally, weth)
    assert vault.address != weth_vault.address
    assert vault.isActive()
    assert guardian_registry.guardianStake(sally) == STAKE_PRICE


#########
# Admin #
#########


def test_admin_ops_owner_only(guardian_registry, weth_vault, usdc, sally, bob, alice, deploy3r):
    ops = [
        ("updateGuardianStakePrice", (STAKE_PRICE * 2,)),
        ("updateGuardianAndDaoCut", (50,)),
        ("setMaxDepositAmount", (weth_vault, EIGHTEEN_DECIMALS)),
        ("updateDefaultAllocation", ({LENDING_LEGO_ID: 10_00},)),
        ("sweepExcessToken", (usdc,)),
    ]
    for caller in (sally, bob, alice, deploy3r):
        for fn, args in ops:
            with pytest.raises(AccessDenied):
                getattr(guardian_registry, fn)(*args, sender=caller)

    assert guardian_registry.guardianStakePrice() == STAKE_PRICE
    assert guardian_registry.guardianAndDaoCut() == PARAMS["local"]["GUARDIAN_AND_DAO_CUT"]
    assert guardian_registry.maxDepositAmount(weth_vault) == 0


def test_update_stake_price(guardian_registry, becomeGuardian, weth, governance, bob):
    with pytest.raises(ZeroAmount):
        guardian_registry.updateGuardianStakePrice(0, sender=governance)

    guardian_registry.updateGuardianStakePrice(STAKE_PRICE * 2, sender=governance)
    log = filter_logs(guardian_registry, "GuardianStakePriceUpdated")[0]
    assert log.oldPrice == STAKE_PRICE
    assert log.newPrice == STAKE_PRICE * 2

    with pytest.raises(StakeTooLow):
        becomeGuardian(bob, weth, _stake=STAKE_PRICE)
    becomeGuardian(bob, weth)
    assert guardian_registry.guardianStake(bob) == STAKE_PRICE * 2


@pytest.mark.parametrize("cut", [0, 1, 2])
def test_update_cut_too_low(guardian_registry, governance, cut):
    with pytest.raises(InvalidFeeCut):
        guardian_registry.updateGuardianAndDaoCut(cut, sender=governance)


def test_update_cut(guardian_registry, governance):
    guardian_registry.updateGuardianAndDaoCut(3, sender=governance)
    assert guardian_registry.guardianAndDaoCut() == 3

    log = filter_logs(guardian_registry, "GuardianAndDaoCutUpdated")[0]
    assert log.oldCut == PARAMS["local"]["GUARDIAN_AND_DAO_CUT"]
    assert log.newCut == 3


def test_set_max_deposit_amount(guardian_registry, weth_vault, createToken, governance):
    guardian_registry.setMaxDepositAmount(weth_vault, 5 * EIGHTEEN_DECIMALS, sender=governance)
    assert guardian_registry.maxDepositAmount(weth_vault) == 5 * EIGHTEEN_DECIMALS
    assert weth_vault.maxDeposit(ZERO_ADDRESS) == 5 * EIGHTEEN_DECIMALS

    log = filter_logs(guardian_registry, "MaxDepositAmountSet")[0]
    assert log.vault == weth_vault.address
    assert log.amount == 5 * EIGHTEEN_DECIMALS

    with pytest.raises(InvalidAddress, match="unknown vault"):
        guardian_registry.setMaxDepositAmount(createToken(), EIGHTEEN_DECIMALS, sender=governance)


def test_update_default_allocation(guardian_registry, becomeGuardian, weth, governance, bob):
    with pytest.raises(InvalidAllocation):
        guardian_registry.updateDefaultAllocation({7: 10_00}, sender=governance)

    guardian_registry.updateDefaultAllocation({LENDING_LEGO_ID: 70_00}, sender=governance)
    assert guardian_registry.defaultAllocation() == {LIQUIDITY_LEGO_ID: 0, LENDING_LEGO_ID: 70_00}

    vault = becomeGuardian(bob, weth)
    assert vault.allocation() == {LIQUIDITY_LEGO_ID: 0, LENDING_LEGO_ID: 70_00}


#########
# Sweep #
#########


def test_sweep_excess_token(guardian_registry, usdc, governance, whale):
    amount = 1_000 * 10 ** 6
    usdc.transfer(guardian_registry, amount, sender=whale)

    assert guardian_registry.sweepExcessToken(usdc, sender=governance) == amount
    assert usdc.balanceOf(governance) == amount
    assert usdc.balanceOf(guardian_registry) == 0

    log = filter_logs(guardian_registry, "TokensSwept")[0]
    assert log.token == usdc.address
    assert log.amount == amount

    with pytest.raises(NothingToSweep):
        guardian_registry.sweepExcessToken(usdc, sender=governance)


def test_sweep_base_asset_keeps_stakes(guardian_registry, weth_vault, weth, governance, whale):
    with pytest.raises(NothingToSweep):
        guardian_registry.sweepExcessToken(weth, sender=governance)

    weth.transfer(guardian_registry, 1, sender=whale)
    assert guardian_registry.sweepExcessToken(weth, sender=governance) == 1
    assert weth.balanceOf(guardian_registry) == STAKE_PRICE
    assert guardian_registry.totalStaked() == STAKE_PRICE


def test_sweep_by_non_owner_moves_nothing(guardian_registry, usdc, bob, whale):
    usdc.transfer(guardian_registry, 10 ** 6, sender=whale)

    with pytest.raises(AccessDenied):
        guardian_registry.sweepExcessToken(usdc, sender=bob)
    assert usdc.balanceOf(guardian_registry) == 10 ** 6
    assert usdc.balanceOf(bob) == 0


#######################
# Argument validation #
#######################


def test_entry_points_check_args_after_auth():
    assert [g.rank for g in GuardianRegistry.becomeGuardian.guards] == [ARGS]
    for fn in ("updateGuardianStakePrice", "updateGuardianAndDaoCut", "setMaxDepositAmount"):
        assert [g.rank for g in getattr(GuardianRegistry, fn).guards] == [AUTH, ARGS]


@pytest.mark.parametrize("stake", [-STAKE_PRICE, 1.5, None])
def test_become_guardian_rejects_invalid_stake(guardian_registry, weth, governance, bob, stake):
    weth.mint(bob, STAKE_PRICE, sender=governance)
    weth.approve(guardian_registry, STAKE_PRICE, sender=bob)

    with pytest.raises(InvalidAmount):
        guardian_registry.becomeGuardian(weth, stake, sender=bob)

    assert not guardian_registry.isGuardian(bob)
    assert weth.balanceOf(bob) == STAKE_PRICE
    assert guardian_registry.totalStaked() == 0


def test_admin_ops_reject_invalid_amounts(guardian_registry, weth_vault, governance):
    with pytest.raises(InvalidAmount):
        guardian_registry.updateGuardianStakePrice(-1, sender=governance)

    with pytest.raises(InvalidAmount):
        guardian_registry.updateGuardianAndDaoCut(-5, sender=governance)

    with pytest.raises(InvalidAmount):
        guardian_registry.updateGuardianAndDaoCut(12.5, sender=governance)

    with pytest.raises(InvalidAmount):
        guardian_registry.setMaxDepositAmount(weth_vault, -1, sender=governance)

    assert guardian_registry.guardianStakePrice() == STAKE_PRICE
    assert guardian_registry.guardianAndDaoCut() == PARAMS["local"]["GUARDIAN_AND_DAO_CUT"]
    assert guardian_registry.maxDepositAmount(weth_vault) == 0


def test_admin_ops_check_caller_before_args(guardian_registry, weth_vault, bob):
    with pytest.raises(AccessDenied):
        guardian_registry.updateGuardianStakePrice(-1, sender=bob)

    with pytest.raises(AccessDenied):
        guardian_registry.updateGuardianAndDaoCut(0, sender=bob)

    with pytest.raises(AccessDenied):
        guardian_registry.setMaxDepositAmount(weth_vault, -1, sender=bob)


def test_registry_deploy_rejects_negative_params(createRegistry):
    with pytest.raises(InvalidAmount):
        createRegistry(_guardianAndDaoCut=-10)

    with pytest.raises(InvalidAmount):
        createRegistry(_guardianStakePrice=-1)
