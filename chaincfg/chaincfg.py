import argparse
import os
import sys
import time

from dotenv import load_dotenv, find_dotenv

from .utils.common import load_config, mask_url
from .utils.constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_HARDHAT_CONFIG_PATH,
    CONFIG_EXTENSIONS,
    START_TIME,
)
from .utils.custom_types import Config
from .utils.defaults import DEFAULT_CONFIG, build_config, build_default_config
from .utils.validator import get_compiler_version
from .utils.secrets import find_leaked_secrets, list_tracked_files
from .utils.hardhat import write_hardhat_config
from .utils.compiler import check_compiler_version
from .utils.node_handler import check_network
from .utils.logger import logger
from .utils.custom_exceptions import (
    ExceptionHandler,
    BaseCustomException,
    LeakedSecretError,
)

__version__ = "0.1.0"


def build_networks_table(config: Config) -> list[list]:
    table = []
    for index, (name, network) in enumerate(config["networks"].items()):
        url = network.get("url")
        table.append(
            [
                index + 1,
                name,
                network.get("chainId", "-"),
                mask_url(url) if url else "-",
                len(network.get("accounts", [])),
            ]
        )
    return table


def run_secrets_check(secrets: dict[str, str], root: str) -> None:
    logger.divider()
    logger.info(f"Scanning tracked files in {root} for secret values...")
    leaks = find_leaked_secrets(secrets, list_tracked_files(root))

    for path, name in leaks:
        logger.error(f"Value of {name} found in", path)

    if leaks:
        raise LeakedSecretError(
            f"{len(leaks)} file(s) contain secret values, rotate the keys"
        )

    logger.okay("No secret values found in tracked files")


def run_online_checks(
    config: Config, verify_compiler: bool, verify_networks: bool
) -> None:
    if verify_compiler:
        logger.divider()
        try:
            check_compiler_version(get_compiler_version(config))
        except BaseCustomException as custom_exc:
            ExceptionHandler.raise_exception_or_log(custom_exc)

    if verify_networks:
        logger.divider()
        for name, network in config["networks"].items():
            try:
                check_network(name, network)
            except BaseCustomException as custom_exc:
                ExceptionHandler.raise_exception_or_log(custom_exc)


def process_config(
    path: str | None,
    check_secrets: bool = False,
    verify_compiler: bool = False,
    verify_networks: bool = False,
    hardhat_config_path: str | None = None,
) -> Config:
    logger.divider()
    if path is None:
        logger.info("Config file not found, using built-in defaults")
        raw_config = DEFAULT_CONFIG
        logger.info("Loading secrets...")
        config, secrets = build_default_config()
    else:
        logger.info(f"Loading config {path}...")
        raw_config = load_config(path)
        logger.info("Loading secrets...")
        config, secrets = build_config(raw_config)

    logger.okay("Compiler version", get_compiler_version(config))
    logger.report_table(build_networks_table(config))

    if hardhat_config_path is not None:
        # rendered from the raw record so that only env var names reach the file
        write_hardhat_config(raw_config, hardhat_config_path)

    if check_secrets:
        run_secrets_check(secrets, os.getcwd())

    run_online_checks(config, verify_compiler, verify_networks)

    return config


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="Validate a Hardhat-style toolchain config and load its secrets from env"
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Display version information"
    )
    parser.add_argument(
        "path", nargs="?", default=None, help="Path to config or directory with configs"
    )
    parser.add_argument(
        "--check-secrets",
        "-S",
        help="Fail if a resolved secret value appears in any tracked file",
        action="store_true",
    )
    parser.add_argument(
        "--verify-compiler",
        "-C",
        help="Check that the compiler version is published on binaries.soliditylang.org",
        action="store_true",
    )
    parser.add_argument(
        "--verify-networks",
        "-N",
        help="Ask every remote network for its chain ID and compare it with the config",
        action="store_true",
    )
    parser.add_argument(
        "--render",
        "-R",
        metavar="PATH",
        nargs="?",
        const=DEFAULT_HARDHAT_CONFIG_PATH,
        default=None,
        help=f"Write a Hardhat config that reads secrets from process.env (default: {DEFAULT_HARDHAT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--fail-on-verification-error",
        help="Stop on the first failed online check instead of logging it",
        action=argparse.BooleanOptionalAction,
        default=True,
    )
    return parser.parse_args(argv)


def collect_config_paths(path: str | None) -> list[str | None]:
    if path is None:
        return [DEFAULT_CONFIG_PATH if os.path.isfile(DEFAULT_CONFIG_PATH) else None]
    if os.path.isfile(path):
        return [path]
    if os.path.isdir(path):
        return [
            os.path.join(path, filename)
            for filename in sorted(os.listdir(path))
            if os.path.isfile(os.path.join(path, filename))
            and os.path.splitext(filename)[1].lower() in CONFIG_EXTENSIONS
        ]
    return []


def main(argv=None):
    args = parse_arguments(argv)
    if args.version:
        print(f"chaincfg {__version__}")
        return
    logger.info("Welcome to chaincfg!")

    # values already in the environment win over .env
    if load_dotenv(find_dotenv(usecwd=True)):
        logger.info("Loaded env vars from .env")

    config_paths = collect_config_paths(args.path)
    if not config_paths:
        logger.error(f"Specified config path {args.path} not found")
        sys.exit(1)

    ExceptionHandler.initialize(args.fail_on_verification_error)

    try:
        for config_path in config_paths:
            process_config(
                config_path,
                args.check_secrets,
                args.verify_compiler,
                args.verify_networks,
                args.render,
            )
    except BaseCustomException as custom_exc:
        logger.error(custom_exc.message)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt by user")
        sys.exit(1)

    execution_time = time.time() - START_TIME

    logger.okay(f"Done in {round(execution_time, 3)}s ✨")


if __name__ == "__main__":
    main()
