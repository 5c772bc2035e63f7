from vault_guardians.env import Contract, as_address, external


class MockPriceOracle(Contract):
    # usd prices with 18 decimals

    def __init__(self, env, label=None):
        super().__init__(env, label)
        self._prices = {}

    @external
    def setPrice(self, _asset, _price):
        self._prices[as_address(_asset)] = _price

    def getPrice(self, _asset):
        return self._prices.get(as_address(_asset), 0)

    def getQuote(self, _tokenIn, _tokenOut, _amountIn):
        priceIn = self.getPrice(_tokenIn)
        priceOut = self.getPrice(_tokenOut)
        if priceIn == 0 or priceOut == 0:
            return 0

        decimalsIn = self.at(_tokenIn).decimals()
        decimalsOut = self.at(_tokenOut).decimals()
        usdValue = _amountIn * priceIn // (10 ** decimalsIn)
        return usdValue * (10 ** decimalsOut) // priceOut
