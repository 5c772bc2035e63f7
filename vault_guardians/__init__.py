from vault_guardians.env import Contract, Env, as_address, external

__all__ = ["Contract", "Env", "as_address", "external"]
