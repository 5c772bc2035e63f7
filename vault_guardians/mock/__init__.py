from vault_guardians.mock.mock_erc20 import MockErc20
from vault_guardians.mock.mock_lending_pool import MockLendingPool, MockReceiptToken
from vault_guardians.mock.mock_liquidity_router import MockLiquidityPair, MockLiquidityRouter
from vault_guardians.mock.mock_price_oracle import MockPriceOracle
from vault_guardians.mock.mock_reentrancy_attacker import MockReentrancyAttacker
