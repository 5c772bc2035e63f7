from vault_guardians.env import as_address
from vault_guardians.errors import WithdrawalMismatch
from vault_guardians.legos.lego import LENDING_LEGO_ID, Lego, LegoResult
from vault_guardians.modules.safe_token import safe_approve


class LendingLego(Lego):
    """Supplies the asset to a lending pool for an interest-bearing receipt token."""

    LEGO_ID = LENDING_LEGO_ID

    def __init__(self, _pool):
        self.pool = as_address(_pool)

    def receiptToken(self, _env, _asset):
        return _env.at(_env.at(self.pool).getReceiptToken(_asset))

    def invest(self, _vault, _asset, _amount):
        if _amount == 0:
            return LegoResult()

        env = _vault.env
        pool = env.at(self.pool)
        receiptToken = self.receiptToken(env, _asset)

        preBalance = receiptToken.balanceOf(_vault)
        safe_approve(env.at(_asset), pool, _amount, _vault.address)
        pool.supply(_asset, _amount, _vault.address, 0, sender=_vault.address)

        return LegoResult(_amount, receiptToken.balanceOf(_vault) - preBalance)

    def divest(self, _vault, _asset, _position, _receipt):
        if _receipt == 0:
            return LegoResult()

        pool = _vault.env.at(self.pool)
        withdrawn = pool.withdraw(_asset, _receipt, _vault.address, sender=_vault.address)
        if withdrawn != _receipt:
            raise WithdrawalMismatch(f"requested {_receipt}, pool returned {withdrawn}")

        # receipt tokens are 1:1 with the asset, interest grows the balance past the record
        return LegoResult(withdrawn, min(_receipt, _position.receipt))

    def positionValue(self, _vault, _asset, _position):
        return self.receiptToken(_vault.env, _asset).balanceOf(_vault)

    def fullReceipt(self, _vault, _asset, _position):
        return self.positionValue(_vault, _asset, _position)

    def receiptForValue(self, _vault, _asset, _position, _value):
        return min(_value, self.positionValue(_vault, _asset, _position))
