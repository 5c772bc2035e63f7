from vault_guardians.env import as_address
from vault_guardians.constants import HUNDRED_PERCENT
from vault_guardians.errors import UnsupportedAsset
from vault_guardians.legos.lego import LIQUIDITY_LEGO_ID, Lego, LegoResult, min_amount_out
from vault_guardians.modules.safe_token import safe_approve


class LiquidityLego(Lego):
    """Provides liquidity to a constant-product market.

    Half of the invested amount is swapped into the asset's counterparty and both
    sides are added as liquidity. Every market call carries a slippage-bounded
    minimum output and a deadline of ``now + deadlineBuffer``.
    """

    LEGO_ID = LIQUIDITY_LEGO_ID

    def __init__(self, _router, _oracle, _counterparties, _slippageTolerance, _deadlineBuffer):
        if not 0 <= _slippageTolerance < HUNDRED_PERCENT:
            raise ValueError("invalid slippage tolerance")
        if _deadlineBuffer <= 0:
            raise ValueError("deadline buffer must be positive")

        self.router = as_address(_router)
        self.oracle = as_address(_oracle)
        self.counterparties = {as_address(a): as_address(b) for a, b in _counterparties.items()}
        self.slippageTolerance = _slippageTolerance
        self.deadlineBuffer = _deadlineBuffer

    def counterparty(self, _asset):
        asset = as_address(_asset)
        if asset not in self.counterparties:
            raise UnsupportedAsset(f"no counterparty for {asset}")
        return self.counterparties[asset]

    def deadline(self, _env):
        return _env.timestamp + self.deadlineBuffer

    def expectedOut(self, _env, _tokenIn, _tokenOut, _amountIn):
        if _amountIn == 0:
            return 0
        expected = _env.at(self.oracle).getQuote(_tokenIn, _tokenOut, _amountIn)
        if expected == 0:
            # no oracle price, fall back to the market's own quote
            expected = _env.at(self.router).getAmountsOut(_amountIn, [_tokenIn, _tokenOut])[-1]
        return expected

    def minOut(self, _expected):
        return min_amount_out(_expected, self.slippageTolerance)

    ##########
    # Invest #
    ##########

    def invest(self, _vault, _asset, _amount):
        env = _vault.env
        router = env.at(self.router)
        counter = self.counterparty(_asset)
        assetToken = env.at(_asset)
        counterToken = env.at(counter)

        amountToSwap = _amount // 2
        expectedSwapOut = self.expectedOut(env, _asset, counter, amountToSwap)
        if expectedSwapOut == 0:
            return LegoResult()

        deadline = self.deadline(env)

        safe_approve(assetToken, router, amountToSwap, _vault.address)
        amounts = router.swapExactTokensForTokens(
            amountToSwap,
            self.minOut(expectedSwapOut),
            [_asset, counter],
            _vault.address,
            deadline,
            sender=_vault.address,
        )
        swapOutput = amounts[-1]

        # the swap spent amountToSwap, what is left for liquidity is the other half
        remaining = _amount - amountToSwap

        safe_approve(assetToken, router, remaining, _vault.address)
        safe_approve(counterToken, router, swapOutput, _vault.address)
        amountAsset, amountCounter, liquidity = router.addLiquidity(
            _asset,
            counter,
            remaining,
            swapOutput,
            self.minOut(remaining),
            self.minOut(swapOutput),
            _vault.address,
            deadline,
            sender=_vault.address,
        )

        # reset whatever the market did not pull
        safe_approve(assetToken, router, 0, _vault.address)
        safe_approve(counterToken, router, 0, _vault.address)

        return LegoResult(amountToSwap + amountAsset, liquidity, swapOutput - amountCounter)

    ##########
    # Divest #
    ##########

    def divest(self, _vault, _asset, _position, _receipt):
        env = _vault.env
        router = env.at(self.router)
        counter = self.counterparty(_asset)
        deadline = self.deadline(env)

        amountAsset = 0
        amountCounter = 0
        if _receipt != 0:
            pair = env.at(router.getPair(_asset, counter))
            reserveAsset, reserveCounter = router.getReserves(_asset, counter)
            supply = pair.totalSupply()

            safe_approve(pair, router, _receipt, _vault.address)
            amountAsset, amountCounter = router.removeLiquidity(
                _asset,
                counter,
                _receipt,
                self.minOut(_receipt * reserveAsset // supply),
                self.minOut(_receipt * reserveCounter // supply),
                _vault.address,
                deadline,
                sender=_vault.address,
            )

        if _receipt >= _position.receipt:
            dust = _position.counterpartyDust
        else:
            dust = _position.counterpartyDust * _receipt // _position.receipt

        swapIn = amountCounter + dust
        expectedSwapOut = self.expectedOut(env, counter, _asset, swapIn)
        if expectedSwapOut == 0:
            # nothing sellable, whatever came back stays as dust
            return LegoResult(amountAsset, _receipt, dust - swapIn)

        safe_approve(env.at(counter), router, swapIn, _vault.address)
        amounts = router.swapExactTokensForTokens(
            swapIn,
            self.minOut(expectedSwapOut),
            [counter, _asset],
            _vault.address,
            deadline,
            sender=_vault.address,
        )
        return LegoResult(amountAsset + amounts[-1], _receipt, dust)

    #########
    # Views #
    #########

    def positionValue(self, _vault, _asset, _position):
        if _position.isEmpty():
            return 0

        env = _vault.env
        router = env.at(self.router)
        counter = self.counterparty(_asset)
        reserveAsset, reserveCounter = router.getReserves(_asset, counter)

        outAsset = 0
        outCounter = 0
        if _position.receipt != 0:
            supply = env.at(router.getPair(_asset, counter)).totalSupply()
            outAsset = _position.receipt * reserveAsset // supply
            outCounter = _position.receipt * reserveCounter // supply

        # value at the reserves left after pulling the position out
        swapIn = outCounter + _position.counterpartyDust
        return outAsset + router.getAmountOut(swapIn, reserveCounter - outCounter, reserveAsset - outAsset)

    def fullReceipt(self, _vault, _asset, _position):
        return _position.receipt

    def receiptForValue(self, _vault, _asset, _position, _value):
        value = self.positionValue(_vault, _asset, _position)
        if value == 0 or _value >= value:
            return _position.receipt
        return min(-(-_position.receipt * _value // value), _position.receipt)
