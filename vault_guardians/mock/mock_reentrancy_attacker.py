from vault_guardians.env import Contract, as_address, external
from vault_guardians.constants import ZERO_ADDRESS


class MockReentrancyAttacker(Contract):
    """Calls back into a target from a token transfer hook."""

    def __init__(self, env, label=None):
        super().__init__(env, label)
        self._target = ZERO_ADDRESS
        self._method = None
        self._args = ()

    @external
    def arm(self, _target, _method, _args=()):
        self._target = as_address(_target)
        self._method = _method
        self._args = tuple(_args)

    def isArmed(self):
        return self._method is not None

    @external
    def onTokenTransfer(self, _sender, _recipient, _amount):
        if self._method is None:
            return

        # one shot
        method = self._method
        self._method = None
        getattr(self.at(self._target), method)(*self._args)
