from vault_guardians.env import Contract, as_address, external
from vault_guardians.errors import InsufficientAllowance, InsufficientBalance, InvalidAddress, InvalidAmount
from vault_guardians.constants import MAX_UINT256, ZERO_ADDRESS
from vault_guardians.events import Approval, Transfer


def check_uint256(_amount):
    # token amounts are unsigned 256-bit integers
    if isinstance(_amount, bool) or not isinstance(_amount, int) or not 0 <= _amount <= MAX_UINT256:
        raise InvalidAmount(f"invalid amount: {_amount!r}")
    return _amount


class Erc20(Contract):
    def __init__(self, env, _name, _symbol, _decimals, label=None):
        super().__init__(env, label or _symbol)
        self._name = _name
        self._symbol = _symbol
        self._decimals = _decimals
        self._totalSupply = 0
        self._balances = {}
        self._allowances = {}

    def name(self):
        return self._name

    def symbol(self):
        return self._symbol

    def decimals(self):
        return self._decimals

    def totalSupply(self):
        return self._totalSupply

    def balanceOf(self, _user):
        return self._balances.get(as_address(_user), 0)

    def allowance(self, _owner, _spender):
        return self._allowances.get((as_address(_owner), as_address(_spender)), 0)

    @external
    def transfer(self, _recipient, _amount):
        self._transfer(self.msg_sender, as_address(_recipient), _amount)
        return True

    @external
    def approve(self, _spender, _amount):
        self._approve(self.msg_sender, as_address(_spender), _amount)
        return True

    @external
    def transferFrom(self, _sender, _recipient, _amount):
        sender = as_address(_sender)
        self._spendAllowance(sender, self.msg_sender, _amount)
        self._transfer(sender, as_address(_recipient), _amount)
        return True

    # internal

    def _transfer(self, _sender, _recipient, _amount):
        check_uint256(_amount)
        if _recipient == ZERO_ADDRESS:
            raise InvalidAddress("invalid recipient")
        balance = self._balances.get(_sender, 0)
        if _amount > balance:
            raise InsufficientBalance(f"insufficient {self._symbol} balance")

        self._balances[_sender] = balance - _amount
        self._balances[_recipient] = self._balances.get(_recipient, 0) + _amount
        self.log(Transfer(_sender, _recipient, _amount))

    def _approve(self, _owner, _spender, _amount):
        check_uint256(_amount)
        if _spender == ZERO_ADDRESS:
            raise InvalidAddress("invalid spender")
        self._allowances[(_owner, _spender)] = _amount
        self.log(Approval(_owner, _spender, _amount))

    def _spendAllowance(self, _owner, _spender, _amount):
        check_uint256(_amount)
        allowance = self._allowances.get((_owner, _spender), 0)
        if allowance == MAX_UINT256:
            return
        if _amount > allowance:
            raise InsufficientAllowance(f"insufficient {self._symbol} allowance")
        self._allowances[(_owner, _spender)] = allowance - _amount

    def _mint(self, _recipient, _amount):
        check_uint256(_amount)
        if _amount == 0:
            return
        self._totalSupply += _amount
        self._balances[_recipient] = self._balances.get(_recipient, 0) + _amount
        self.log(Transfer(ZERO_ADDRESS, _recipient, _amount))

    def _burn(self, _owner, _amount):
        check_uint256(_amount)
        balance = self._balances.get(_owner, 0)
        if _amount > balance:
            raise InsufficientBalance(f"insufficient {self._symbol} balance")
        self._balances[_owner] = balance - _amount
        self._totalSupply -= _amount
        self.log(Transfer(_owner, ZERO_ADDRESS, _amount))
