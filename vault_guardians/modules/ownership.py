from vault_guardians.env import Contract, as_address, external
from vault_guardians.errors import InvalidAddress
from vault_guardians.constants import ZERO_ADDRESS
from vault_guardians.events import OwnershipTransferred
from vault_guardians.modules.guards import guarded, only_owner


class Ownership(Contract):
    def __init__(self, env, _owner, label=None):
        super().__init__(env, label)
        owner = as_address(_owner)
        if owner == ZERO_ADDRESS:
            raise InvalidAddress("invalid owner")
        self._owner = owner

    def owner(self):
        return self._owner

    @external
    @guarded(only_owner)
    def transferOwnership(self, _newOwner):
        newOwner = as_address(_newOwner)
        if newOwner in (ZERO_ADDRESS, self._owner):
            raise InvalidAddress("invalid new owner")

        prevOwner = self._owner
        self._owner = newOwner
        self.log(OwnershipTransferred(prevOwner, newOwner))
