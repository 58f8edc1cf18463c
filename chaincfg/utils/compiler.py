import platform
import sys

from .common import fetch
from .logger import logger
from .constants import SOLC_BIN_URL
from .custom_exceptions import CompilerError


def get_solc_native_platform_from_os():
    platform_name = sys.platform
    if platform_name == "linux":
        return "linux-amd64"
    elif platform_name == "darwin":
        return "macosx-amd64" if platform.machine() == "x86_64" else "macosx-arm64"
    elif platform_name == "win32":
        return "windows-amd64"
    else:
        raise CompilerError(f"Unsupported platform {platform_name}")


def get_available_compiler_versions(required_platform) -> set[str]:
    compilers_list_url = f"{SOLC_BIN_URL}/{required_platform}/list.json"
    try:
        available_compilers_list = fetch(compilers_list_url).json()
    except ValueError:
        raise CompilerError(f"{compilers_list_url} did not return JSON")

    if not isinstance(available_compilers_list, dict) or not isinstance(
        available_compilers_list.get("releases"), dict
    ):
        raise CompilerError(f"Unexpected compilers list from {compilers_list_url}")

    return set(available_compilers_list["releases"])


def check_compiler_version(required_compiler_version, required_platform=None):
    if required_platform is None:
        required_platform = get_solc_native_platform_from_os()

    logger.info(
        f'Looking up solc "{required_compiler_version}" for "{required_platform}" ...'
    )
    if required_compiler_version not in get_available_compiler_versions(
        required_platform
    ):
        raise CompilerError(
            f'Required compiler version "{required_compiler_version}" for "{required_platform}" is not found'
        )

    logger.okay("Compiler version is available", required_compiler_version)
