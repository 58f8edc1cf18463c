from typing import TypedDict, NotRequired


class SoliditySettings(TypedDict):
    version: str
    settings: NotRequired[dict]


class NetworkConfig(TypedDict):
    chainId: NotRequired[int]
    url: NotRequired[str]
    accounts: NotRequired[list[str]]


class Config(TypedDict):
    solidity: str | SoliditySettings
    networks: dict[str, NetworkConfig]
