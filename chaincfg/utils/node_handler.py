import json

from .common import pull, mask_url
from .logger import logger
from .custom_types import NetworkConfig
from .custom_exceptions import NodeError


def get_chain_id(rpc_url: str) -> int:
    """
    Get the chain ID from an RPC node.

    Args:
        rpc_url: The RPC URL

    Returns:
        The chain ID as an integer

    Raises:
        NodeError: If the chain ID cannot be retrieved
    """
    logger.info(f'Receiving the chain ID from "{mask_url(rpc_url)}" ...')

    payload = json.dumps(
        {"id": 1, "jsonrpc": "2.0", "method": "eth_chainId", "params": []}
    )

    headers = {"Content-Type": "application/json"}
    try:
        chain_id_response = pull(rpc_url, payload, headers).json()
    except ValueError:
        raise NodeError("Node returned a response that is not JSON")

    if not isinstance(chain_id_response, dict) or "result" not in chain_id_response:
        raise NodeError(f"Failed to retrieve chain ID: {chain_id_response}")

    # Convert hex string to decimal integer
    try:
        chain_id = int(chain_id_response["result"], 16)
    except (TypeError, ValueError):
        raise NodeError(
            f"Chain ID is not a hex string: {chain_id_response['result']!r}"
        )

    logger.okay("Chain ID was successfully received")
    return chain_id


def check_network(name: str, network: NetworkConfig) -> None:
    if "url" not in network:
        logger.info(f"{name} has no RPC URL, skipping")
        return

    chain_id = get_chain_id(network["url"])
    if "chainId" not in network:
        logger.okay(f"{name} is reachable, chain ID", chain_id)
        return

    if chain_id != network["chainId"]:
        raise NodeError(
            f'{name} declares chain ID {network["chainId"]}, the node reports {chain_id}'
        )

    logger.okay(f"{name} chain ID matches", chain_id)
