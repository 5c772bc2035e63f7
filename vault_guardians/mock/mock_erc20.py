from vault_guardians.env import as_address, external
from vault_guardians.constants import ZERO_ADDRESS
from vault_guardians.errors import AccessDenied
from vault_guardians.modules.erc20 import Erc20, check_uint256


class MockErc20(Erc20):
    """Mintable token with the failure modes real tokens show.

    ``nonReverting`` makes failed transfers return False instead of raising,
    ``failApprovals`` makes every approve return False, and a transfer hook
    calls ``onTokenTransfer`` on a contract after each transfer.
    """

    def __init__(self, env, _minter, _name, _symbol, _decimals, _initialSupply=0, label=None):
        super().__init__(env, _name, _symbol, _decimals, label)
        self._minter = as_address(_minter)
        self._nonReverting = False
        self._failApprovals = False
        self._transferHook = ZERO_ADDRESS
        if _initialSupply:
            self._mint(self._minter, _initialSupply * 10 ** _decimals)

    @external
    def mint(self, _recipient, _amount):
        if self.msg_sender != self._minter:
            raise AccessDenied("only minter")
        self._mint(as_address(_recipient), _amount)
        return True

    # failure modes

    @external
    def setNonReverting(self, _shouldNotRevert):
        self._nonReverting = _shouldNotRevert

    @external
    def setFailApprovals(self, _shouldFail):
        self._failApprovals = _shouldFail

    @external
    def setTransferHook(self, _target):
        self._transferHook = as_address(_target)

    # erc20

    @external
    def transfer(self, _recipient, _amount):
        sender = self.msg_sender
        check_uint256(_amount)
        if self._nonReverting and _amount > self._balances.get(sender, 0):
            return False
        self._transfer(sender, as_address(_recipient), _amount)
        self._callHook(sender, _recipient, _amount)
        return True

    @external
    def transferFrom(self, _sender, _recipient, _amount):
        sender = as_address(_sender)
        check_uint256(_amount)
        if self._nonReverting and (
            _amount > self._balances.get(sender, 0)
            or _amount > self.allowance(sender, self.msg_sender)
        ):
            return False
        self._spendAllowance(sender, self.msg_sender, _amount)
        self._transfer(sender, as_address(_recipient), _amount)
        self._callHook(sender, _recipient, _amount)
        return True

    @external
    def approve(self, _spender, _amount):
        if self._failApprovals:
            return False
        self._approve(self.msg_sender, as_address(_spender), _amount)
        return True

    def _callHook(self, _sender, _recipient, _amount):
        if self._transferHook != ZERO_ADDRESS:
            self.at(self._transferHook).onTokenTransfer(_sender, as_address(_recipient), _amount)
