import copy

from mergedeep import merge

from config.BluePrint import DAY, HOUR, LEGO_IDS, MINUTE, MOCK_MARKETS, PARAMS, TOKENS
from scripts.utils import json_file
from vault_guardians.constants import EIGHTEEN_DECIMALS, MAX_UINT256, ZERO_ADDRESS


class Seconds:
    MINUTE = MINUTE
    HOUR = HOUR
    DAY = DAY


class Constants:
    ZERO_ADDRESS = ZERO_ADDRESS
    MAX_UINT256 = MAX_UINT256
    EIGHTEEN_DECIMALS = EIGHTEEN_DECIMALS


class BluePrint:
    """Parameter tables for one blueprint, with optional overrides deep-merged on top.

    Overrides come from a JSON params file shaped like the blueprint tables::

        {"PARAMS": {"GUARDIAN_AND_DAO_CUT": 20}, "MOCK_MARKETS": {"DEPLOYER_SUPPLY": 5000}}
    """

    def __init__(self, blueprint, overrides=None):
        if blueprint not in PARAMS:
            raise KeyError(f"unknown blueprint `{blueprint}`")

        tables = {
            "PARAMS": copy.deepcopy(PARAMS[blueprint]),
            "TOKENS": copy.deepcopy(TOKENS[blueprint]),
            "MOCK_MARKETS": copy.deepcopy(MOCK_MARKETS[blueprint]),
        }
        if overrides:
            overrides = copy.deepcopy(overrides)
            allocation = overrides.get("PARAMS", {}).pop("DEFAULT_ALLOCATION", None)
            merge(tables, overrides)
            # json keys are strings, and an allocation is replaced as a whole
            if allocation is not None:
                tables["PARAMS"]["DEFAULT_ALLOCATION"] = {int(k): v for k, v in allocation.items()}

        self.blueprint = blueprint
        self.PARAMS = tables["PARAMS"]
        self.TOKENS = {symbol: tuple(token) for symbol, token in tables["TOKENS"].items()}
        self.MOCK_MARKETS = tables["MOCK_MARKETS"]
        self.SECONDS = Seconds
        self.CONSTANTS = Constants
        self.LEGO_IDS = LEGO_IDS


class DeployArgs:
    def __init__(self, sender, blueprint, params_file=None, verbose=False):
        overrides = json_file.load(params_file) if params_file else None
        self.sender = sender
        self.blueprint = BluePrint(blueprint, overrides)
        self.params_file = params_file
        self.verbose = verbose
        self.LEGO_IDS = LEGO_IDS

    def __repr__(self):
        return f"DeployArgs(blueprint={self.blueprint.blueprint!r}, params_file={self.params_file!r}, verbose={self.verbose})"
