from vault_guardians.registries.guardian_registry import GuardianData, GuardianRegistry
