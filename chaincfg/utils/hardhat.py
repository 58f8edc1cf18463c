import json
import re

from .logger import logger
from .helpers import create_dirs
from .secrets import PLACEHOLDER_PATTERN, is_placeholder
from .custom_types import Config
from .constants import HARDHAT_TOOLBOX_PLUGIN

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
INDENT = "  "


def _render_template_literal(value: str) -> str:
    parts = []
    position = 0
    for match in PLACEHOLDER_PATTERN.finditer(value):
        parts.append(_escape_template_text(value[position : match.start()]))
        parts.append(f"${{process.env.{match.group(1)}}}")
        position = match.end()
    parts.append(_escape_template_text(value[position:]))
    return "`" + "".join(parts) + "`"


def _escape_template_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("$", "\\$")


def _render_string(value: str) -> str:
    if is_placeholder(value):
        return f"process.env.{PLACEHOLDER_PATTERN.fullmatch(value).group(1)}"
    if PLACEHOLDER_PATTERN.search(value):
        return _render_template_literal(value)
    return json.dumps(value)


def _render_key(key: str) -> str:
    return key if IDENTIFIER_PATTERN.fullmatch(key) else json.dumps(key)


def _render_value(value, depth: int) -> str:
    if isinstance(value, str):
        return _render_string(value)
    if isinstance(value, dict):
        if not value:
            return "{}"
        inner = INDENT * (depth + 1)
        lines = [
            f"{inner}{_render_key(str(key))}: {_render_value(item, depth + 1)},"
            for key, item in value.items()
        ]
        return "{\n" + "\n".join(lines) + "\n" + INDENT * depth + "}"
    if isinstance(value, list):
        return "[" + ", ".join(_render_value(item, depth) for item in value) + "]"
    # bool, int, float and None share their JSON spelling
    return json.dumps(value)


def render_hardhat_config(config: Config) -> str:
    """
    Render a ``hardhat.config.js`` for the record.

    Expects the record as loaded from disk: every ``${NAME}`` placeholder turns into
    a ``process.env.NAME`` read, so the generated file never holds a secret value.
    """
    body = _render_value(
        {"solidity": config["solidity"], "networks": config["networks"]}, 0
    )
    return (
        f'require("{HARDHAT_TOOLBOX_PLUGIN}");\n'
        "\n"
        "/** @type import('hardhat/config').HardhatUserConfig */\n"
        f"module.exports = {body};\n"
    )


def write_hardhat_config(config: Config, path: str) -> None:
    create_dirs(path)
    with open(path, mode="w") as hardhat_config_file:
        hardhat_config_file.write(render_hardhat_config(config))
    logger.okay("Hardhat config written", path)
