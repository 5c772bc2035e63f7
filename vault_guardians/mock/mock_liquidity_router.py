"""Constant-product market (router + pairs) used as the liquidity lego's counterparty."""

from math import isqrt

from vault_guardians.env import as_address, external, Contract
from vault_guardians.constants import HUNDRED_PERCENT, MINIMUM_LIQUIDITY, ZERO_ADDRESS
from vault_guardians.errors import (
    AccessDenied,
    DeadlineExpired,
    InsufficientLiquidity,
    InvalidAddress,
    SlippageExceeded,
    ZeroAmount,
)
from vault_guardians.modules.erc20 import Erc20


class MockLiquidityPair(Erc20):
    def __init__(self, env, _router, _tokenA, _tokenB, label=None):
        tokenA = env.at(_tokenA)
        tokenB = env.at(_tokenB)
        symbol = f"{tokenA.symbol()}-{tokenB.symbol()}-LP"
        super().__init__(env, f"{symbol} Pair", symbol, 18, label)
        self._router = as_address(_router)
        self._reserves = {tokenA.address: 0, tokenB.address: 0}

    def getReserve(self, _token):
        return self._reserves[as_address(_token)]

    def _onlyRouter(self):
        if self.msg_sender != self._router:
            raise AccessDenied("only router")

    @external
    def sync(self):
        for token in self._reserves:
            self._reserves[token] = self.at(token).balanceOf(self)

    @external
    def mintLiquidity(self, _recipient, _amount):
        self._onlyRouter()
        self._mint(as_address(_recipient), _amount)

    @external
    def burnLiquidity(self, _amount):
        self._onlyRouter()
        self._burn(self.address, _amount)

    @external
    def pay(self, _token, _recipient, _amount):
        self._onlyRouter()
        if _amount:
            self.at(_token).transfer(_recipient, _amount)


class MockLiquidityRouter(Contract):
    def __init__(self, env, _feeBps=30, label=None):
        super().__init__(env, label)
        self._pairs = {}
        self._feeBps = _feeBps
        self._inclusionDelay = 0
        self._calls = []

    ##########
    # Config #
    ##########

    @external
    def createPair(self, _tokenA, _tokenB):
        key = self._pairKey(_tokenA, _tokenB)
        if key in self._pairs:
            raise InvalidAddress("pair exists")
        pair = MockLiquidityPair(self.env, self.address, key[0], key[1])
        self._pairs[key] = pair.address
        return pair.address

    @external
    def setFeeBps(self, _feeBps):
        self._feeBps = _feeBps

    @external
    def setInclusionDelay(self, _seconds):
        # a transaction sitting this long before it executes
        self._inclusionDelay = _seconds

    #########
    # Views #
    #########

    def getPair(self, _tokenA, _tokenB):
        return self._pairs.get(self._pairKey(_tokenA, _tokenB), ZERO_ADDRESS)

    def getReserves(self, _tokenA, _tokenB):
        pairAddr = self.getPair(_tokenA, _tokenB)
        if pairAddr == ZERO_ADDRESS:
            return 0, 0
        pair = self.at(pairAddr)
        return pair.getReserve(_tokenA), pair.getReserve(_tokenB)

    def getAmountOut(self, _amountIn, _reserveIn, _reserveOut):
        if _amountIn == 0 or _reserveIn == 0 or _reserveOut == 0:
            return 0
        amountInWithFee = _amountIn * (HUNDRED_PERCENT - self._feeBps)
        return amountInWithFee * _reserveOut // (_reserveIn * HUNDRED_PERCENT + amountInWithFee)

    def getAmountsOut(self, _amountIn, _path):
        amounts = [_amountIn]
        for tokenIn, tokenOut in zip(_path, _path[1:]):
            reserveIn, reserveOut = self.getReserves(tokenIn, tokenOut)
            amounts.append(self.getAmountOut(amounts[-1], reserveIn, reserveOut))
        return amounts

    def quote(self, _amountA, _reserveA, _reserveB):
        if _reserveA == 0:
            return 0
        return _amountA * _reserveB // _reserveA

    def getCalls(self):
        return list(self._calls)

    #########
    # Swaps #
    #########

    @external
    def swapExactTokensForTokens(self, _amountIn, _amountOutMin, _path, _to, _deadline):
        self._record("swap", _deadline, amountIn=_amountIn, amountOutMin=_amountOutMin, path=tuple(_path))
        self._ensure(_deadline)
        if _amountIn == 0:
            raise ZeroAmount

        amounts = self.getAmountsOut(_amountIn, _path)
        if amounts[-1] < _amountOutMin:
            raise SlippageExceeded(f"swap out {amounts[-1]} below min {_amountOutMin}")
        if amounts[-1] == 0:
            raise InsufficientLiquidity("insufficient output amount")

        sender = self.msg_sender
        self.at(_path[0]).transferFrom(sender, self.getPair(_path[0], _path[1]), _amountIn)

        for i, (tokenIn, tokenOut) in enumerate(zip(_path, _path[1:])):
            pair = self.at(self.getPair(tokenIn, tokenOut))
            isLastHop = i == len(_path) - 2
            recipient = _to if isLastHop else self.getPair(tokenOut, _path[i + 2])
            pair.pay(tokenOut, recipient, amounts[i + 1])
            pair.sync()

        return amounts

    #############
    # Liquidity #
    #############

    @external
    def addLiquidity(self, _tokenA, _tokenB, _amountADesired, _amountBDesired, _amountAMin, _amountBMin, _to, _deadline):
        self._record(
            "addLiquidity",
            _deadline,
            amountADesired=_amountADesired,
            amountBDesired=_amountBDesired,
            amountAMin=_amountAMin,
            amountBMin=_amountBMin,
        )
        self._ensure(_deadline)

        pairAddr = self.getPair(_tokenA, _tokenB)
        if pairAddr == ZERO_ADDRESS:
            pairAddr = self.createPair(_tokenA, _tokenB)
        pair = self.at(pairAddr)

        amountA, amountB = self._liquidityAmounts(_tokenA, _tokenB, _amountADesired, _amountBDesired, _amountAMin, _amountBMin)
        reserveA, reserveB = self.getReserves(_tokenA, _tokenB)
        supply = pair.totalSupply()

        if supply == 0:
            liquidity = isqrt(amountA * amountB) - MINIMUM_LIQUIDITY
            if liquidity > 0:
                pair.mintLiquidity(ZERO_ADDRESS, MINIMUM_LIQUIDITY)
        else:
            liquidity = min(amountA * supply // reserveA, amountB * supply // reserveB)
        if liquidity <= 0:
            raise InsufficientLiquidity("insufficient liquidity minted")

        sender = self.msg_sender
        self.at(_tokenA).transferFrom(sender, pairAddr, amountA)
        self.at(_tokenB).transferFrom(sender, pairAddr, amountB)
        pair.mintLiquidity(_to, liquidity)
        pair.sync()

        return amountA, amountB, liquidity

    @external
    def removeLiquidity(self, _tokenA, _tokenB, _liquidity, _amountAMin, _amountBMin, _to, _deadline):
        self._record("removeLiquidity", _deadline, liquidity=_liquidity, amountAMin=_amountAMin, amountBMin=_amountBMin)
        self._ensure(_deadline)

        pair = self.at(self.getPair(_tokenA, _tokenB))
        reserveA, reserveB = self.getReserves(_tokenA, _tokenB)
        supply = pair.totalSupply()
        amountA = _liquidity * reserveA // supply
        amountB = _liquidity * reserveB // supply
        if amountA < _amountAMin or amountB < _amountBMin:
            raise SlippageExceeded("insufficient amount out")

        pair.transferFrom(self.msg_sender, pair.address, _liquidity)
        pair.burnLiquidity(_liquidity)
        pair.pay(_tokenA, _to, amountA)
        pair.pay(_tokenB, _to, amountB)
        pair.sync()

        return amountA, amountB

    ############
    # Internal #
    ############

    def _pairKey(self, _tokenA, _tokenB):
        tokenA = as_address(_tokenA)
        tokenB = as_address(_tokenB)
        if tokenA == tokenB:
            raise InvalidAddress("identical tokens")
        return tuple(sorted((tokenA, tokenB), key=str.lower))

    def _ensure(self, _deadline):
        if self.env.timestamp + self._inclusionDelay > _deadline:
            raise DeadlineExpired

    def _record(self, _fn, _deadline, **params):
        self._calls.append(dict(fn=_fn, deadline=_deadline, timestamp=self.env.timestamp, **params))

    def _liquidityAmounts(self, _tokenA, _tokenB, _amountADesired, _amountBDesired, _amountAMin, _amountBMin):
        reserveA, reserveB = self.getReserves(_tokenA, _tokenB)
        if reserveA == 0 and reserveB == 0:
            return _amountADesired, _amountBDesired

        amountBOptimal = self.quote(_amountADesired, reserveA, reserveB)
        if amountBOptimal <= _amountBDesired:
            if amountBOptimal < _amountBMin:
                raise SlippageExceeded("insufficient B amount")
            return _amountADesired, amountBOptimal

        amountAOptimal = self.quote(_amountBDesired, reserveB, reserveA)
        if amountAOptimal < _amountAMin:
            raise SlippageExceeded("insufficient A amount")
        return amountAOptimal, _amountBDesired
