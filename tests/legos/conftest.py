import pytest

from config.BluePrint import PARAMS
from conf_mock import seedPool
from constants import EIGHTEEN_DECIMALS, LIQUIDITY_LEGO_ID
from vault_guardians.legos import LiquidityLego
from vault_guardians.mock import MockLiquidityRouter, MockPriceOracle


@pytest.fixture(scope="package")
def routerCallsSince():
    def routerCallsSince(_router, _count):
        return _router.getCalls()[_count:]

    yield routerCallsSince


@pytest.fixture
def isolated_market(env, createToken, createRegistry, becomeGuardian, governance, sally):
    """Fee-less pool of 1,000,000 ASSET / 600,300 CTR with ASSET priced at 0.6 CTR."""
    asset = createToken("ASSET", 18, 10_000_000)
    counter = createToken("CTR", 18, 10_000_000)

    router = MockLiquidityRouter(env, 0, label="isolated_router")
    seedPool(env, router, asset, counter, 1_000_000, 600_300, governance)

    oracle = MockPriceOracle(env, label="isolated_oracle")
    oracle.setPrice(asset, 6 * EIGHTEEN_DECIMALS // 10)
    oracle.setPrice(counter, EIGHTEEN_DECIMALS)

    lego = LiquidityLego(
        router,
        oracle,
        {asset.address: counter.address},
        PARAMS["local"]["LIQUIDITY_SLIPPAGE_TOLERANCE"],
        PARAMS["local"]["LIQUIDITY_DEADLINE_BUFFER"],
    )
    registry = createRegistry(
        _baseAsset=asset,
        _supportedAssets=(),
        _legos=(lego,),
        _defaultAllocation={LIQUIDITY_LEGO_ID: 100_00},
    )
    vault = becomeGuardian(sally, asset, _registry=registry)

    return {
        "asset": asset,
        "counter": counter,
        "router": router,
        "oracle": oracle,
        "lego": lego,
        "registry": registry,
        "vault": vault,
    }
