import os

import dotenv
from eth_account import Account

from vault_guardians.utils import log

dotenv.load_dotenv()


# well-known local development key, never holds real funds
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"


def get_account(accountName):
    log.h2(f"Connecting to deployer account {accountName}")

    accountKey = os.environ.get(f"{accountName}_PRIVATE_KEY")
    if not accountKey:
        log.info(f"\t{accountName}_PRIVATE_KEY not set, using local test key")
    account = Account.from_key(accountKey if accountKey else TEST_PRIVATE_KEY)
    log.h3(f"Deployer account {accountName} connected: {account.address}")

    return account
