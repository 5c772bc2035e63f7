# token calls that check the boolean return of tokens that do not revert

from vault_guardians.errors import ApprovalFailed, TransferFailed


def safe_transfer(_token, _recipient, _amount, _sender):
    if not _token.transfer(_recipient, _amount, sender=_sender):
        raise TransferFailed(f"{_token.label} transfer failed")


def safe_transfer_from(_token, _from, _recipient, _amount, _sender):
    if not _token.transferFrom(_from, _recipient, _amount, sender=_sender):
        raise TransferFailed(f"{_token.label} transferFrom failed")


def safe_approve(_token, _spender, _amount, _sender):
    if not _token.approve(_spender, _amount, sender=_sender):
        raise ApprovalFailed(f"{_token.label} approve failed")
