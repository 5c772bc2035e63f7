"""Revert reasons raised by vault guardians contracts.

Every error aborts the whole transaction it was raised in; the environment
restores all contract storage to the state before the outermost call.
"""


class VaultGuardiansError(Exception):
    reason = "reverted"

    def __init__(self, reason=None):
        self.reason = reason or self.reason
        super().__init__(self.reason)


# access / lifecycle


class AccessDenied(VaultGuardiansError):
    reason = "no perms"


class ReentrantCall(VaultGuardiansError):
    reason = "reentrant call"


class VaultInactive(VaultGuardiansError):
    reason = "vault not active"


# accounting bounds


class InvalidAmount(VaultGuardiansError):
    reason = "invalid amount"


class ZeroAmount(VaultGuardiansError):
    reason = "cannot use 0 amount"


class ZeroShares(VaultGuardiansError):
    reason = "cannot mint 0 shares"


class InvalidAddress(VaultGuardiansError):
    reason = "invalid address"


class DepositExceedsMax(VaultGuardiansError):
    reason = "exceeds max deposit"


class InsufficientShares(VaultGuardiansError):
    reason = "insufficient shares"


class InsufficientLiquidity(VaultGuardiansError):
    reason = "insufficient liquidity"


class WithdrawalMismatch(InsufficientLiquidity):
    reason = "withdrawn amount mismatch"


class InsufficientBalance(VaultGuardiansError):
    reason = "insufficient balance"


class InsufficientAllowance(VaultGuardiansError):
    reason = "insufficient allowance"


# token calls


class TransferFailed(VaultGuardiansError):
    reason = "transfer failed"


class ApprovalFailed(VaultGuardiansError):
    reason = "approval failed"


# external markets


class SlippageExceeded(VaultGuardiansError):
    reason = "slippage exceeded"


class DeadlineExpired(VaultGuardiansError):
    reason = "deadline expired"


# configuration


class InvalidAllocation(VaultGuardiansError):
    reason = "invalid allocation"


class InvalidFeeCut(VaultGuardiansError):
    reason = "invalid fee cut"


class UnsupportedAsset(VaultGuardiansError):
    reason = "unsupported asset"


class NothingToSweep(VaultGuardiansError):
    reason = "nothing to sweep"


# guardians


class StakeTooLow(VaultGuardiansError):
    reason = "stake too low"


class GuardianAlreadyExists(VaultGuardiansError):
    reason = "already guardian for asset"


class NotBaseGuardian(VaultGuardiansError):
    reason = "must guard base asset first"


class CannotQuitWithActivePositions(VaultGuardiansError):
    reason = "vaults still invested"
