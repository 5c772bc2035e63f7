from dataclasses import dataclass


# erc20


@dataclass(frozen=True)
class Transfer:
    sender: str
    recipient: str
    amount: int


@dataclass(frozen=True)
class Approval:
    owner: str
    spender: str
    amount: int


# ownership


@dataclass(frozen=True)
class OwnershipTransferred:
    prevOwner: str
    newOwner: str


# vault


@dataclass(frozen=True)
class Deposit:
    sender: str
    owner: str
    assets: int
    shares: int


@dataclass(frozen=True)
class Withdraw:
    sender: str
    receiver: str
    owner: str
    assets: int
    shares: int


@dataclass(frozen=True)
class FeeSharesMinted:
    guardian: str
    guardianShares: int
    treasury: str
    treasuryShares: int


@dataclass(frozen=True)
class Invested:
    legoId: int
    amount: int
    receipt: int


@dataclass(frozen=True)
class Divested:
    legoId: int
    receipt: int
    assetsReturned: int


@dataclass(frozen=True)
class AllocationUpdated:
    allocation: tuple


@dataclass(frozen=True)
class VaultDeactivated:
    assetsRetained: int


# guardian registry


@dataclass(frozen=True)
class GuardianAdded:
    guardian: str
    asset: str
    vault: str
    stake: int


@dataclass(frozen=True)
class GuardianQuit:
    guardian: str
    asset: str
    stakeReturned: int


@dataclass(frozen=True)
class GuardianStakePriceUpdated:
    oldPrice: int
    newPrice: int


@dataclass(frozen=True)
class GuardianAndDaoCutUpdated:
    oldCut: int
    newCut: int


@dataclass(frozen=True)
class MaxDepositAmountSet:
    vault: str
    amount: int


@dataclass(frozen=True)
class TokensSwept:
    token: str
    amount: int
