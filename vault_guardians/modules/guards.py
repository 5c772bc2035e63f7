"""Ordered guard chains for state-mutating entry points.

Every guarded entry point takes the contract's reentrancy lock first, then runs
its declared checks in rank order: lifecycle, then authorization, then
argument validation. The order is validated when the chain is declared.
"""

import functools
from contextlib import contextmanager

from vault_guardians.errors import AccessDenied, ReentrantCall


LIFECYCLE = 1
AUTH = 2
ARGS = 3


class Guard:
    def __init__(self, rank, check):
        self.rank = rank
        self.check = check
        self.__name__ = check.__name__

    def __call__(self, _contract, *args, **kwargs):
        self.check(_contract, *args, **kwargs)

    def __repr__(self):
        return f"<Guard {self.__name__} rank={self.rank}>"


def lifecycle(check):
    return Guard(LIFECYCLE, check)


def auth(check):
    return Guard(AUTH, check)


def args(check):
    return Guard(ARGS, check)


@contextmanager
def reentrancy_lock(_contract):
    if _contract._locked:
        raise ReentrantCall
    _contract._locked = True
    try:
        yield
    finally:
        _contract._locked = False


def guarded(*guards):
    ranks = [g.rank for g in guards]
    if ranks != sorted(ranks):
        raise ValueError(f"guards out of order: {guards}")

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(self, *args, **kwargs):
            with reentrancy_lock(self):
                for guard in guards:
                    guard(self, *args, **kwargs)
                return fn(self, *args, **kwargs)

        wrapper.guards = guards
        return wrapper

    return decorator


@auth
def only_owner(_contract, *args, **kwargs):
    if _contract.msg_sender != _contract.owner():
        raise AccessDenied("no perms")
