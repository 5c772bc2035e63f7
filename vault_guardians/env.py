"""Simulated chain the vault guardians contracts run in.

The environment hands out checksummed addresses, keeps the block clock, tracks
call frames (so a contract knows its ``msg_sender``) and the event log, and
makes every outermost call all-or-nothing: contract storage is snapshotted when
the call starts and restored if any exception escapes it.

Contract methods decorated with :func:`external` accept a ``sender=`` keyword.
Inside another contract's call the default sender is that calling contract,
at the top level it is ``env.eoa``.
"""

import copy
import functools
from contextlib import contextmanager
from dataclasses import dataclass

from eth_utils import is_address, keccak, to_checksum_address

from vault_guardians.constants import GENESIS_TIMESTAMP, SECONDS_PER_BLOCK
from vault_guardians.errors import InvalidAddress
from vault_guardians.utils import log


def as_address(_value):
    addr = getattr(_value, "address", _value)
    if not isinstance(addr, str) or not is_address(addr):
        raise InvalidAddress(f"invalid address: {addr!r}")
    return to_checksum_address(addr)


@dataclass(frozen=True)
class Frame:
    sender: str
    contract: str


@dataclass(frozen=True)
class Snapshot:
    storage: dict
    logs: int
    timestamp: int
    block_number: int


class Env:
    def __init__(self, timestamp=GENESIS_TIMESTAMP, verbose=False):
        self.timestamp = timestamp
        self.block_number = 1
        self.verbose = verbose
        self._contracts = {}
        self._frames = []
        self._logs = []
        self._txLogStart = 0
        self._nonce = 0
        self.eoa = self.generate_address("eoa")

    ############
    # Accounts #
    ############

    def generate_address(self, alias=None):
        self._nonce += 1
        seed = f"{alias or 'account'}:{self._nonce}"
        return to_checksum_address(keccak(text=seed)[-20:])

    def register(self, contract, alias=None):
        addr = self.generate_address(alias)
        self._contracts[addr] = contract
        return addr

    def at(self, _address):
        addr = as_address(_address)
        if addr not in self._contracts:
            raise InvalidAddress(f"no contract at {addr}")
        return self._contracts[addr]

    def is_contract(self, _address):
        return as_address(_address) in self._contracts

    #########
    # Clock #
    #########

    def time_travel(self, seconds=0, blocks=0):
        self.block_number += blocks
        self.timestamp += seconds + blocks * SECONDS_PER_BLOCK

    #########
    # Calls #
    #########

    @property
    def msg_sender(self):
        if not self._frames:
            return self.eoa
        return self._frames[-1].sender

    def call(self, contract, fn, sender, args, kwargs):
        if sender is None:
            sender = self._frames[-1].contract if self._frames else self.eoa

        is_outermost = not self._frames
        snapshot = None
        if is_outermost:
            snapshot = self.snapshot()
            self._txLogStart = len(self._logs)

        self._frames.append(Frame(as_address(sender), contract.address))
        try:
            result = fn(contract, *args, **kwargs)
        except Exception as e:
            if is_outermost:
                self.restore(snapshot)
                if self.verbose:
                    log.revert(contract.label, fn.__name__, e)
            raise
        finally:
            self._frames.pop()

        if is_outermost and self.verbose:
            log.tx(contract.label, fn.__name__, sender)
        return result

    ##########
    # Events #
    ##########

    def emit(self, _address, _event):
        self._logs.append((_address, _event))

    def get_logs(self, _address=None, _all=False):
        # by default only what the last outermost call emitted
        logs = self._logs if _all else self._logs[self._txLogStart:]
        return [e for addr, e in logs if _address is None or addr == _address]

    #############
    # Snapshots #
    #############

    def snapshot(self):
        storage = {addr: c.storage() for addr, c in self._contracts.items()}
        return Snapshot(storage, len(self._logs), self.timestamp, self.block_number)

    def restore(self, _snapshot):
        # contracts created after the snapshot disappear with it
        for addr in list(self._contracts):
            if addr not in _snapshot.storage:
                del self._contracts[addr]

        for addr, state in _snapshot.storage.items():
            self._contracts[addr].load_storage(state)

        del self._logs[_snapshot.logs:]
        self._txLogStart = min(self._txLogStart, _snapshot.logs)
        self.timestamp = _snapshot.timestamp
        self.block_number = _snapshot.block_number

    @contextmanager
    def anchor(self):
        snapshot = self.snapshot()
        try:
            yield self
        finally:
            self.restore(snapshot)


class Contract:
    def __init__(self, env, label=None):
        self.env = env
        self.label = label or type(self).__name__
        self._locked = False
        self.address = env.register(self, self.label)

    @property
    def msg_sender(self):
        return self.env.msg_sender

    def at(self, _address):
        return self.env.at(_address)

    def log(self, _event):
        self.env.emit(self.address, _event)

    def get_logs(self, _all=False):
        return self.env.get_logs(self.address, _all)

    def storage(self):
        return {k: copy.deepcopy(v) for k, v in vars(self).items() if k != "env"}

    def load_storage(self, _state):
        env = self.env
        self.__dict__.clear()
        self.__dict__.update(copy.deepcopy(_state))
        self.env = env

    def __repr__(self):
        return f"<{self.label} at {self.address}>"


def external(fn):
    @functools.wraps(fn)
    def wrapper(self, *args, sender=None, **kwargs):
        return self.env.call(self, fn, sender, args, kwargs)

    wrapper.is_external = True
    return wrapper
