ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
EIGHTEEN_DECIMALS = 10 ** 18
MAX_UINT256 = 2 ** 256 - 1
HUNDRED_PERCENT = 100_00
RAY = 10 ** 27

# genesis clock for a fresh environment (seconds)
GENESIS_TIMESTAMP = 1_700_000_000
SECONDS_PER_BLOCK = 2

# constant-product market
MINIMUM_LIQUIDITY = 1_000
