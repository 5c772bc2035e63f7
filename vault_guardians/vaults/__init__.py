from vault_guardians.vaults.vault_shares import VaultShares
