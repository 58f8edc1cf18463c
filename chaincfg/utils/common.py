import json
import os
import requests
import yaml

from urllib.parse import urlparse

from .logger import logger
from .custom_types import Config
from .constants import REQUEST_TIMEOUT_SEC
from .custom_exceptions import (
    ConfigError,
    SecretNotFoundError,
    CompilerError,
    NodeError,
)


def load_env(variable_name, required=True, masked=False):
    value = os.getenv(variable_name, default=None)

    if required and not value:
        logger.error("Env not found", variable_name)
        raise SecretNotFoundError(f"{variable_name} is not set")

    printable_value = describe_secret(value) if masked and value else value

    if printable_value:
        logger.okay(f"{variable_name}", printable_value)
    else:
        logger.info(f"{variable_name} var is not set")

    return value


class _UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader that refuses mappings with repeated keys instead of keeping the last one."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            try:
                duplicate = key in seen
            except TypeError:
                continue
            if duplicate:
                raise ConfigError(
                    f'duplicate key "{key}" at line {key_node.start_mark.line + 1}'
                )
            seen.add(key)
        return super().construct_mapping(node, deep)


def _reject_duplicate_keys(pairs):
    result = {}
    for key, value in pairs:
        if key in result:
            raise ConfigError(f'duplicate key "{key}"')
        result[key] = value
    return result


def _check_compiler_version_type(config: dict, path: str) -> None:
    solidity = config.get("solidity")
    version = solidity.get("version") if isinstance(solidity, dict) else solidity
    if version is not None and not isinstance(version, str):
        raise ConfigError(
            f'compiler version {version!r} in {path} was parsed as '
            f"{type(version).__name__}, quote it"
        )


def load_config(path: str) -> Config:
    extension = os.path.splitext(path)[1].lower()

    with open(path, mode="r", encoding="utf-8") as config_file:
        if extension == ".json":
            config = json.load(config_file, object_pairs_hook=_reject_duplicate_keys)
        elif extension in (".yaml", ".yml"):
            config = yaml.load(config_file, Loader=_UniqueKeyLoader)
            if config is None:
                raise ConfigError(f"{path} is empty or contains only comments")
        else:
            raise ConfigError(f'Unsupported config file extension "{extension}"')

    if not isinstance(config, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    _check_compiler_version_type(config, path)
    return config


def _scrub_url(text: str, url: str) -> str:
    """Hide the secret-bearing parts of ``url`` wherever requests echoed them into ``text``."""
    if not url:
        return text
    parsed_url = urlparse(url)
    text = text.replace(url, mask_url(url))
    # urllib3 reports only the path, e.g. "Max retries exceeded with url: /v3/<key>"
    path_and_query = parsed_url.path + (f"?{parsed_url.query}" if parsed_url.query else "")
    for fragment in (path_and_query, parsed_url.path):
        if fragment not in ("", "/"):
            text = text.replace(fragment, "/***")
    return text


def _handle_request_errors(error_class):
    """Decorator to handle common HTTP request errors and convert them to custom exceptions."""

    def decorator(func):
        def wrapper(*args, **kwargs):
            url = kwargs.get("url", args[0] if args else "")
            try:
                response = func(*args, **kwargs)
                response.raise_for_status()
                return response
            except requests.exceptions.HTTPError as http_err:
                message = f"HTTP error occurred: {http_err}"
            except requests.exceptions.ConnectionError as conn_err:
                message = f"Connection error occurred: {conn_err}"
            except requests.exceptions.Timeout as timeout_err:
                message = f"Timeout error occurred: {timeout_err}"
            except requests.exceptions.RequestException as req_err:
                message = f"Request exception occurred: {req_err}"
            raise error_class(_scrub_url(message, url))

        return wrapper

    return decorator


@_handle_request_errors(CompilerError)
def fetch(url, headers=None):
    logger.log(f"Fetch: {url}")
    return requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT_SEC)


@_handle_request_errors(NodeError)
def pull(url, payload=None, headers=None):
    logger.log(f"Pull: {mask_url(url)}")
    return requests.post(url, data=payload, headers=headers, timeout=REQUEST_TIMEOUT_SEC)


def mask_url(url: str) -> str:
    """Keep scheme and host, star everything that may carry a key (credentials, path, query)."""
    parsed_url = urlparse(url)
    if not parsed_url.scheme or not parsed_url.netloc:
        return "*" * len(url)
    host = parsed_url.netloc.rpartition("@")[2]
    has_secret_part = (
        parsed_url.path not in ("", "/")
        or parsed_url.query
        or "@" in parsed_url.netloc
    )
    return f"{parsed_url.scheme}://{host}" + ("/***" if has_secret_part else "")


def describe_secret(value: str) -> str:
    return f"set ({len(value)} chars)"
