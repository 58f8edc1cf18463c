import re

from urllib.parse import urlparse, parse_qsl

from .logger import logger
from .secrets import is_placeholder, PLACEHOLDER_PATTERN
from .custom_types import Config
from .constants import HARDHAT_NETWORK_NAME, HARDHAT_CHAIN_ID
from .custom_exceptions import ConfigError, LeakedSecretError

VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+")
PRIVATE_KEY_PATTERN = re.compile(r"(0x)?[0-9a-fA-F]{64}")
# Infura project ids are 32 hex chars, Alchemy keys 32 url-safe chars
TOKEN_PATTERN = re.compile(r"(?=[A-Za-z_-]*\d)[A-Za-z0-9_-]{32,}")

NETWORK_KEYS = {"chainId", "url", "accounts"}


def get_compiler_version(config: Config) -> str:
    solidity = config["solidity"]
    if isinstance(solidity, dict):
        return solidity["version"]
    return solidity


def _validate_solidity(config: Config, problems: list[str]) -> None:
    if "solidity" not in config:
        problems.append('"solidity" is missing')
        return

    solidity = config["solidity"]
    if isinstance(solidity, dict):
        if "version" not in solidity:
            problems.append('"solidity.version" is missing')
            return
        if not isinstance(solidity.get("settings", {}), dict):
            problems.append('"solidity.settings" must be a mapping')
    elif not isinstance(solidity, str):
        problems.append('"solidity" must be a version string or a mapping')
        return

    version = get_compiler_version(config)
    if not isinstance(version, str) or not VERSION_PATTERN.fullmatch(version):
        problems.append(f'compiler version "{version}" is not MAJOR.MINOR.PATCH')


def _validate_url(name: str, url: str, problems: list[str]) -> None:
    # placeholders may sit anywhere in the url, the host part must still parse
    parsed_url = urlparse(PLACEHOLDER_PATTERN.sub("placeholder", url))
    if parsed_url.scheme not in ("http", "https") or not parsed_url.hostname:
        problems.append(f'{name}.url "{url}" is not an http(s) URL')


def _validate_network(name: str, network, problems: list[str]) -> None:
    if not isinstance(network, dict):
        problems.append(f"{name} must be a mapping")
        return

    unknown_keys = sorted(set(network) - NETWORK_KEYS)
    if unknown_keys:
        problems.append(f"{name} has unknown keys {unknown_keys}")

    if "chainId" in network:
        chain_id = network["chainId"]
        # bool is an int subclass
        if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id <= 0:
            problems.append(f"{name}.chainId must be a positive integer")
        elif name == HARDHAT_NETWORK_NAME and chain_id != HARDHAT_CHAIN_ID:
            problems.append(f"{name}.chainId must be {HARDHAT_CHAIN_ID}, got {chain_id}")

    if name == HARDHAT_NETWORK_NAME:
        if "url" in network:
            problems.append(f"{name} is the in-process network and takes no url")
    elif "url" not in network:
        problems.append(f"{name}.url is missing")
    elif not isinstance(network["url"], str):
        problems.append(f"{name}.url must be a string")
    else:
        _validate_url(name, network["url"], problems)

    if "accounts" in network and not isinstance(network["accounts"], list):
        problems.append(f"{name}.accounts must be a list")


def _check_accounts_hygiene(name: str, network) -> None:
    if not isinstance(network, dict) or not isinstance(network.get("accounts"), list):
        return
    for index, account in enumerate(network["accounts"]):
        if not is_placeholder(account):
            raise LeakedSecretError(
                f"{name}.accounts[{index}] must be a ${{ENV_VAR}} reference"
            )


def looks_like_token(value: str) -> bool:
    return TOKEN_PATTERN.fullmatch(value) is not None


def _check_url_hygiene(name: str, network) -> None:
    if not isinstance(network, dict) or not isinstance(network.get("url"), str):
        return
    # placeholders are fine wherever they sit, only literal text is inspected
    parsed_url = urlparse(PLACEHOLDER_PATTERN.sub("", network["url"]))
    if parsed_url.password:
        raise LeakedSecretError(f"{name}.url embeds a password")

    segments = parsed_url.path.split("/")
    segments += [value for _, value in parse_qsl(parsed_url.query)]
    if any(looks_like_token(segment) for segment in segments):
        raise LeakedSecretError(
            f"{name}.url embeds an API key, use a ${{ENV_VAR}} reference"
        )


def validate_config(config: Config) -> None:
    """
    Check the record as loaded from disk, before any env var is read.

    Raises:
        LeakedSecretError: If a signing key or an API key is written inline
        ConfigError: Listing every shape problem found
    """
    networks = config.get("networks")
    if isinstance(networks, dict):
        for name, network in networks.items():
            _check_accounts_hygiene(name, network)
            _check_url_hygiene(name, network)

    problems = []
    _validate_solidity(config, problems)

    if networks is None:
        problems.append('"networks" is missing')
    elif not isinstance(networks, dict):
        problems.append('"networks" must be a mapping')
    else:
        for name, network in networks.items():
            _validate_network(name, network, problems)

    unknown_keys = sorted(set(config) - {"solidity", "networks"})
    if unknown_keys:
        logger.warn("Ignoring unknown top-level keys", unknown_keys)

    if problems:
        raise ConfigError("; ".join(problems))


def validate_resolved_config(config: Config) -> None:
    problems = []
    for name, network in config["networks"].items():
        if "url" in network:
            _validate_url(name, network["url"], problems)
        for index, account in enumerate(network.get("accounts", [])):
            if not isinstance(account, str) or not PRIVATE_KEY_PATTERN.fullmatch(
                account
            ):
                problems.append(
                    f"{name}.accounts[{index}] is not a 32-byte hex private key"
                )

    if problems:
        raise ConfigError("; ".join(problems))
