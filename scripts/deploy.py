import click

from config.BluePrint import PARAMS
from scripts.protocol import deploy_protocol, run_scenario
from scripts.utils.accounts import get_account
from scripts.utils.deploy_args import DeployArgs
from scripts.utils.deployer import Deployer
from vault_guardians.errors import VaultGuardiansError
from vault_guardians.utils import log


DEPLOY_OPTIONS = {
    "blueprint": {
        "default": "local",
        "help": "Blueprint whose parameter tables are deployed. Defaults to `local`.",
    },
    "manifest": {
        "default": "./deployments/manifest.json",
        "help": "JSON manifest the deployed addresses are merged into. Defaults to `./deployments/manifest.json`.",
    },
    "params_file": {
        "default": None,
        "help": "JSON file deep-merged over the blueprint tables (PARAMS, TOKENS, MOCK_MARKETS).",
    },
    "account": {
        "default": "DEPLOYER",
        "help": "Account name, the key is read from `<ACCOUNT>_PRIVATE_KEY`. Defaults to `DEPLOYER`.",
    },
    "scenario": {
        "default": 0,
        "help": "Onboard a demo guardian and deposit this many whole base-asset tokens. Defaults to 0 (skip).",
    },
}


@click.command()
@click.option(
    "--blueprint", "-b",
    default=DEPLOY_OPTIONS["blueprint"]["default"],
    help=DEPLOY_OPTIONS["blueprint"]["help"],
    type=click.Choice(sorted(PARAMS.keys()), case_sensitive=False),
)
@click.option(
    "--manifest", "-m",
    default=DEPLOY_OPTIONS["manifest"]["default"],
    help=DEPLOY_OPTIONS["manifest"]["help"],
    type=click.Path(dir_okay=False),
)
@click.option(
    "--params-file", "-p",
    default=DEPLOY_OPTIONS["params_file"]["default"],
    help=DEPLOY_OPTIONS["params_file"]["help"],
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    "--account", "-a",
    default=DEPLOY_OPTIONS["account"]["default"],
    help=DEPLOY_OPTIONS["account"]["help"],
)
@click.option(
    "--scenario", "-s",
    default=DEPLOY_OPTIONS["scenario"]["default"],
    help=DEPLOY_OPTIONS["scenario"]["help"],
    type=click.IntRange(min=0),
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Trace every transaction and revert.")
def cli(blueprint, manifest, params_file, account, scenario, verbose):
    """
    Deploys the vault guardians protocol into a fresh local environment.

    Mock tokens, an oracle, a constant-product router with seeded pools and
    a lending pool are deployed first, then the liquidity and lending legos
    and the guardian registry wired to them. Every address lands in the JSON
    manifest under the blueprint's name; an existing manifest is deep-merged,
    not overwritten.
    """

    sender = get_account(account)
    deploy_args = DeployArgs(sender, blueprint, params_file=params_file, verbose=verbose)

    log.h1("Vault Guardians Deployment")
    log.info(f"Deployer account `{sender.address}`.")
    log.info(f"Manifest `{manifest}`.")
    log.info(f"Deployment arguments: {deploy_args}")

    deployer = Deployer(deploy_args, manifest)
    try:
        protocol = deploy_protocol(deployer)
        extra = {}
        if scenario:
            extra["scenario"] = run_scenario(deployer, protocol, scenario)
    except VaultGuardiansError as e:
        log.error(f"Deployment reverted: {e.reason}")
        raise click.ClickException(e.reason)

    deployer.end(extra)
    log.info("Done.")
    log.info("")


if __name__ == "__main__":
    cli()
