import copy
import fnmatch
import os
import re
import subprocess

from .logger import logger
from .common import load_env
from .custom_types import Config
from .custom_exceptions import SecretNotFoundError

PLACEHOLDER_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")

SKIPPED_DIRS = {".git", "digest", "__pycache__", ".pytest_cache", "node_modules"}
# local secret stores, never committed
SKIPPED_FILE_PATTERNS = (".env", ".env.*", "*.env")


def find_placeholders(value: str) -> list[str]:
    names = []
    for name in PLACEHOLDER_PATTERN.findall(value):
        if name not in names:
            names.append(name)
    return names


def is_placeholder(value) -> bool:
    return isinstance(value, str) and PLACEHOLDER_PATTERN.fullmatch(value) is not None


def _secret_fields(config: Config):
    """Yield every string in the record that may carry a placeholder."""
    for network in config.get("networks", {}).values():
        if not isinstance(network, dict):
            continue
        if isinstance(network.get("url"), str):
            yield network["url"]
        for account in network.get("accounts") or []:
            if isinstance(account, str):
                yield account


def collect_secret_names(config: Config) -> list[str]:
    names = []
    for value in _secret_fields(config):
        for name in find_placeholders(value):
            if name not in names:
                names.append(name)
    return names


def resolve_secrets(config: Config) -> tuple[Config, dict[str, str]]:
    """
    Substitute every ``${NAME}`` placeholder with the value of the env var ``NAME``.

    Args:
        config: Record as loaded from disk, placeholders intact

    Returns:
        A resolved copy of the record and the mapping of env var names to values

    Raises:
        SecretNotFoundError: If any referenced env var is unset or empty,
            listing all of them
    """
    secrets = {}
    missing = []
    for name in collect_secret_names(config):
        value = load_env(name, required=False, masked=True)
        if value:
            secrets[name] = value
        else:
            missing.append(name)
    if missing:
        raise SecretNotFoundError(", ".join(missing) + " not set")

    def substitute(value: str) -> str:
        return PLACEHOLDER_PATTERN.sub(lambda match: secrets[match.group(1)], value)

    resolved = copy.deepcopy(config)
    for network in resolved.get("networks", {}).values():
        if isinstance(network.get("url"), str):
            network["url"] = substitute(network["url"])
        if "accounts" in network:
            network["accounts"] = [
                substitute(account) if isinstance(account, str) else account
                for account in network["accounts"]
            ]

    return resolved, secrets


def list_tracked_files(root: str) -> list[str]:
    try:
        process = subprocess.run(
            ["git", "ls-files", "-z"],
            cwd=root,
            capture_output=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        logger.warn(f"{root} is not a git work tree, scanning every file")
        return _walk_files(root)

    return [
        os.path.join(root, name)
        for name in process.stdout.decode().split("\0")
        if name
    ]


def _walk_files(root: str) -> list[str]:
    paths = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in SKIPPED_DIRS)
        for filename in sorted(filenames):
            if any(
                fnmatch.fnmatch(filename, pattern) for pattern in SKIPPED_FILE_PATTERNS
            ):
                continue
            paths.append(os.path.join(dirpath, filename))
    return paths


def find_leaked_secrets(
    secrets: dict[str, str], paths: list[str]
) -> list[tuple[str, str]]:
    leaks = []
    for path in paths:
        try:
            with open(path, mode="r", encoding="utf-8") as source_file:
                text = source_file.read()
        except (OSError, UnicodeDecodeError):
            continue

        for name, value in secrets.items():
            if value and value in text:
                leaks.append((path, name))

    return leaks
