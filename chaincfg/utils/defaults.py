from .custom_types import Config
from .secrets import resolve_secrets
from .validator import validate_config, validate_resolved_config
from .constants import HARDHAT_NETWORK_NAME, HARDHAT_CHAIN_ID

DEFAULT_SOLIDITY_VERSION = "0.8.18"

INFURA_API_KEY_ENV_VAR = "INFURA_API_KEY"
SEPOLIA_PRIVATE_KEY_ENV_VAR = "SEPOLIA_PRIVATE_KEY"

DEFAULT_CONFIG: Config = {
    "solidity": DEFAULT_SOLIDITY_VERSION,
    "networks": {
        HARDHAT_NETWORK_NAME: {
            "chainId": HARDHAT_CHAIN_ID,
        },
        "sepolia": {
            "url": f"https://sepolia.infura.io/v3/${{{INFURA_API_KEY_ENV_VAR}}}",
            "accounts": [f"${{{SEPOLIA_PRIVATE_KEY_ENV_VAR}}}"],
        },
    },
}


def build_config(raw_config: Config) -> tuple[Config, dict[str, str]]:
    """Validate a record as loaded from disk, then fill in its secrets from env."""
    validate_config(raw_config)
    config, secrets = resolve_secrets(raw_config)
    validate_resolved_config(config)
    return config, secrets


def build_default_config() -> tuple[Config, dict[str, str]]:
    return build_config(DEFAULT_CONFIG)
