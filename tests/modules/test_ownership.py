import pytest

from constants import ZERO_ADDRESS
from conf_utils import filter_logs
from vault_guardians.errors import AccessDenied, InvalidAddress
from vault_guardians.modules.ownership import Ownership


@pytest.fixture
def mock_ownership(env, bob):
    return Ownership(env, bob, label="mock_ownership")


def test_ownership_deployment(mock_ownership, bob):
    assert mock_ownership.owner() == bob


def test_ownership_deployment_invalid_owner(env):
    with pytest.raises(InvalidAddress, match="invalid owner"):
        Ownership(env, ZERO_ADDRESS)


def test_transfer_ownership(mock_ownership, bob, alice):
    mock_ownership.transferOwnership(alice, sender=bob)

    log = filter_logs(mock_ownership, "OwnershipTransferred")[0]
    assert log.prevOwner == bob
    assert log.newOwner == alice
    assert mock_ownership.owner() == alice

    # previous owner lost control
    with pytest.raises(AccessDenied, match="no perms"):
        mock_ownership.transferOwnership(bob, sender=bob)


def test_transfer_ownership_no_permissions(mock_ownership, alice, charlie):
    with pytest.raises(AccessDenied, match="no perms"):
        mock_ownership.transferOwnership(charlie, sender=alice)


def test_transfer_ownership_invalid_new_owner(mock_ownership, bob):
    with pytest.raises(InvalidAddress):
        mock_ownership.transferOwnership(ZERO_ADDRESS, sender=bob)

    with pytest.raises(InvalidAddress):
        mock_ownership.transferOwnership(bob, sender=bob)
