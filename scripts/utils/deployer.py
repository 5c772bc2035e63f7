import os

from mergedeep import merge

from scripts.utils import json_file
from scripts.utils.deploy_args import DeployArgs
from vault_guardians.env import Env
from vault_guardians.legos import Lego
from vault_guardians.utils import log


class Deployer:
    """Deploys contracts into a fresh environment and records them in a manifest.

    Every deployed contract (and every lego, which lives outside the chain) is
    appended to the manifest as soon as it exists. The manifest file is merged
    into whatever the file already holds, so several blueprints can share one.
    """

    def __init__(self, deploy_args: DeployArgs, manifest_path):
        self._deploy_args = deploy_args
        self._manifest_path = manifest_path
        self._count = 0
        self.env = Env(verbose=deploy_args.verbose)
        self.contracts = {}
        self.manifest = {
            "blueprint": deploy_args.blueprint.blueprint,
            "deployer": deploy_args.sender.address,
            "contracts": {},
            "legos": {},
        }

    @property
    def account(self):
        return self._deploy_args.sender

    @property
    def blueprint(self):
        return self._deploy_args.blueprint

    def deploy(self, cls, *args, label=None):
        """
        Deploys a contract class with the given constructor args.
        Returns the deployed contract.
        """
        label = label or cls.__name__
        log.h2(f"Deploying {label}")

        contract = cls(self.env, *args, label=label)
        self.contracts[label] = contract
        self.manifest["contracts"][label] = {
            "address": contract.address,
            "class": cls.__name__,
            "args": [_describe(arg) for arg in args],
        }

        log.h3(f"{label} deployed at {contract.address}")
        return contract

    def include_lego(self, label, lego):
        self.manifest["legos"][label] = {
            "legoId": lego.LEGO_ID,
            "class": type(lego).__name__,
            "config": {k: _describe(v) for k, v in vars(lego).items()},
        }
        log.h3(f"{label} registered with lego id {lego.LEGO_ID}")
        return lego

    def execute(self, transaction, *args, **kwargs):
        """
        Executes a contract call from the deployer account.
        Returns whatever the call returns.
        """
        self._count += 1
        kwargs.setdefault("sender", self.account.address)
        log.info(f"\tTransaction {self._count}: {_fn_name(transaction)}")
        return transaction(*args, **kwargs)

    def get_address(self, label):
        return self.manifest["contracts"][label]["address"]

    def end(self, extra=None):
        """
        Saves the manifest file and returns the merged content.
        """
        if extra:
            merge(self.manifest, extra)

        previous = json_file.load(self._manifest_path, default={})
        merged = merge({}, previous, {self.blueprint.blueprint: self.manifest})
        json_file.save(self._manifest_path, merged)

        log.info(f"Manifest saved to {os.path.abspath(self._manifest_path)}")
        log.info(f"Transactions executed: {self._count}")
        return merged


def _fn_name(transaction):
    owner = getattr(transaction, "__self__", None)
    name = getattr(transaction, "__name__", str(transaction))
    return f"{owner.label}.{name}" if owner is not None else name


def _describe(value):
    # json-friendly view of constructor args
    if hasattr(value, "address"):
        return value.address
    if isinstance(value, Lego):
        return f"lego:{value.LEGO_ID}"
    if isinstance(value, dict):
        return {str(k): _describe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_describe(v) for v in value]
    if isinstance(value, int) and value > 2 ** 53:
        return str(value)
    return value
