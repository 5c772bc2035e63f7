"""Wires a complete local protocol: mock markets, legos and the guardian registry."""

from vault_guardians.legos import LendingLego, LiquidityLego
from vault_guardians.mock import MockErc20, MockLendingPool, MockLiquidityRouter, MockPriceOracle
from vault_guardians.registries import GuardianRegistry
from vault_guardians.utils import log


def deploy_protocol(d):
    bp = d.blueprint
    markets = bp.MOCK_MARKETS
    owner = d.account.address

    log.h1("Mock tokens")
    tokens = {}
    for symbol, (name, decimals, _price) in bp.TOKENS.items():
        tokens[symbol] = d.deploy(MockErc20, owner, name, symbol, decimals, markets["DEPLOYER_SUPPLY"], label=symbol)

    log.h1("Mock markets")
    oracle = d.deploy(MockPriceOracle, label="PriceOracle")
    for symbol, (_name, _decimals, price) in bp.TOKENS.items():
        d.execute(oracle.setPrice, tokens[symbol], price)

    router = d.deploy(MockLiquidityRouter, bp.PARAMS["ROUTER_FEE_BPS"], label="LiquidityRouter")
    deadline = d.env.timestamp + bp.SECONDS.HOUR
    for symbolA, symbolB, reserveA, reserveB in markets["POOLS"]:
        tokenA, tokenB = tokens[symbolA], tokens[symbolB]
        amountA = reserveA * 10 ** tokenA.decimals()
        amountB = reserveB * 10 ** tokenB.decimals()
        d.execute(tokenA.approve, router, amountA)
        d.execute(tokenB.approve, router, amountB)
        d.execute(router.addLiquidity, tokenA, tokenB, amountA, amountB, amountA, amountB, owner, deadline)
        log.h3(f"Seeded {symbolA}/{symbolB} pool at {router.getPair(tokenA, tokenB)}")

    lendingPool = d.deploy(MockLendingPool, label="LendingPool")
    for symbol in markets["SUPPORTED_ASSETS"]:
        d.execute(lendingPool.initReserve, tokens[symbol])

    log.h1("Legos")
    baseAsset = tokens[markets["BASE_ASSET"]]
    stableAsset = tokens[markets["STABLE_ASSET"]]
    counterparties = {}
    for symbol in markets["SUPPORTED_ASSETS"]:
        # base pairs with the stable token, everything else with the base
        token = tokens[symbol]
        counterparties[token.address] = stableAsset.address if token is baseAsset else baseAsset.address

    liquidityLego = d.include_lego(
        "LiquidityLego",
        LiquidityLego(
            router,
            oracle,
            counterparties,
            bp.PARAMS["LIQUIDITY_SLIPPAGE_TOLERANCE"],
            bp.PARAMS["LIQUIDITY_DEADLINE_BUFFER"],
        ),
    )
    lendingLego = d.include_lego("LendingLego", LendingLego(lendingPool))

    log.h1("Guardian registry")
    treasury = d.env.generate_address("treasury")
    registry = d.deploy(
        GuardianRegistry,
        owner,
        treasury,
        baseAsset,
        [tokens[symbol] for symbol in markets["SUPPORTED_ASSETS"]],
        [liquidityLego, lendingLego],
        bp.PARAMS["GUARDIAN_STAKE_PRICE"],
        bp.PARAMS["GUARDIAN_AND_DAO_CUT"],
        bp.PARAMS["DEFAULT_ALLOCATION"],
        label="GuardianRegistry",
    )

    return {
        "tokens": tokens,
        "oracle": oracle,
        "router": router,
        "lendingPool": lendingPool,
        "liquidityLego": liquidityLego,
        "lendingLego": lendingLego,
        "treasury": treasury,
        "registry": registry,
    }


def run_scenario(d, protocol, depositAmount):
    """Onboards a guardian on the base asset and makes one deposit."""
    registry = protocol["registry"]
    baseAsset = d.env.at(registry.baseAsset())
    decimals = baseAsset.decimals()
    stake = registry.guardianStakePrice()
    assets = depositAmount * 10 ** decimals

    log.h1("Demo scenario")
    guardian = d.env.generate_address("guardian")
    depositor = d.env.generate_address("depositor")
    d.execute(baseAsset.transfer, guardian, stake)
    d.execute(baseAsset.transfer, depositor, assets)

    d.execute(baseAsset.approve, registry, stake, sender=guardian)
    vault = d.env.at(d.execute(registry.becomeGuardian, baseAsset, stake, sender=guardian))
    log.h3(f"Guardian {guardian} runs {vault.symbol()} at {vault.address}")

    d.execute(baseAsset.approve, vault, assets, sender=depositor)
    userShares = d.execute(vault.deposit, assets, depositor, sender=depositor)
    guardianShares = vault.balanceOf(guardian)
    treasuryShares = vault.balanceOf(protocol["treasury"])

    log.h2("Share split")
    log.amount("depositor", userShares, decimals)
    log.amount("guardian", guardianShares, decimals)
    log.amount("treasury", treasuryShares, decimals)
    log.amount("vault total assets", vault.totalAssets(), decimals)

    return {
        "guardian": guardian,
        "depositor": depositor,
        "vault": vault.address,
        "assets": str(assets),
        "userShares": str(userShares),
        "guardianShares": str(guardianShares),
        "treasuryShares": str(treasuryShares),
        "totalAssets": str(vault.totalAssets()),
    }
