# time (seconds)
MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR

EIGHTEEN_DECIMALS = 10 ** 18


LEGO_IDS = {
    "LIQUIDITY": 1,
    "LENDING": 2,
}


PARAMS = {
    "local": {
        # guardian registry
        "GUARDIAN_STAKE_PRICE": 10 * EIGHTEEN_DECIMALS,
        "GUARDIAN_AND_DAO_CUT": 1_000,
        # default vault allocation (basis points, remainder stays idle)
        "DEFAULT_ALLOCATION": {
            LEGO_IDS["LIQUIDITY"]: 25_00,
            LEGO_IDS["LENDING"]: 25_00,
        },
        # liquidity lego
        "LIQUIDITY_SLIPPAGE_TOLERANCE": 1_00,
        "LIQUIDITY_DEADLINE_BUFFER": 5 * MINUTE,
        # mock router
        "ROUTER_FEE_BPS": 30,
    },
    "sepolia": {
        # guardian registry
        "GUARDIAN_STAKE_PRICE": 10 * EIGHTEEN_DECIMALS,
        "GUARDIAN_AND_DAO_CUT": 1_000,
        # default vault allocation (basis points, remainder stays idle)
        "DEFAULT_ALLOCATION": {
            LEGO_IDS["LIQUIDITY"]: 50_00,
            LEGO_IDS["LENDING"]: 30_00,
        },
        # liquidity lego
        "LIQUIDITY_SLIPPAGE_TOLERANCE": 2_00,
        "LIQUIDITY_DEADLINE_BUFFER": 10 * MINUTE,
        # mock router
        "ROUTER_FEE_BPS": 30,
    },
}


TOKENS = {
    "local": {
        # symbol: (name, decimals, usd price with 18 decimals)
        "WETH": ("Wrapped Ether", 18, 2_000 * EIGHTEEN_DECIMALS),
        "USDC": ("USD Coin", 6, 1 * EIGHTEEN_DECIMALS),
        "LINK": ("Chainlink", 18, 15 * EIGHTEEN_DECIMALS),
    },
    "sepolia": {
        "WETH": ("Wrapped Ether", 18, 2_000 * EIGHTEEN_DECIMALS),
        "USDC": ("USD Coin", 6, 1 * EIGHTEEN_DECIMALS),
        "LINK": ("Chainlink", 18, 15 * EIGHTEEN_DECIMALS),
    },
}


MOCK_MARKETS = {
    "local": {
        # base asset first, it pairs with the stable token
        "BASE_ASSET": "WETH",
        "STABLE_ASSET": "USDC",
        "SUPPORTED_ASSETS": ["WETH", "USDC", "LINK"],
        # whole-token reserves seeded into each pool: (token a, token b, reserve a, reserve b)
        "POOLS": [
            ("WETH", "USDC", 1_000, 2_000_000),
            ("LINK", "WETH", 400_000, 3_000),
        ],
        # whole tokens minted to the deployer before seeding pools
        "DEPLOYER_SUPPLY": 100_000_000,
    },
    "sepolia": {
        "BASE_ASSET": "WETH",
        "STABLE_ASSET": "USDC",
        "SUPPORTED_ASSETS": ["WETH", "USDC", "LINK"],
        "POOLS": [
            ("WETH", "USDC", 100, 200_000),
            ("LINK", "WETH", 40_000, 300),
        ],
        "DEPLOYER_SUPPLY": 10_000_000,
    },
}
