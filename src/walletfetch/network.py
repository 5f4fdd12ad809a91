"""
Network selection for test runs.

A NetworkRegistry holds the network a test run targets. It is a plain value
owned by the caller; create one per run and pass it where it is needed.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

import requests

from walletfetch.constants import (
    DEFAULT_LOCAL_RPC_URL,
    LOCAL_RPC_TIMEOUT,
    LOCALHOST_NETWORK,
    UNKNOWN_NETWORK_NAME,
)
from walletfetch.exceptions import (
    ConfigurationError,
    NetworkUnreachableError,
)
from walletfetch.log_utils import logger
from walletfetch.utils import get_user_agent


@dataclass(frozen=True)
class NetworkDescriptor:
    """The blockchain network a test run targets."""

    network_name: str
    network_id: int
    is_testnet: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "networkName": self.network_name,
            "networkId": self.network_id,
            "isTestnet": self.is_testnet,
        }


@dataclass(frozen=True)
class NetworkConfig:
    """A custom network supplied by the caller."""

    network_name: str
    chain_id: Union[int, str]
    is_testnet: bool


PRESET_NETWORKS: Mapping[str, NetworkDescriptor] = MappingProxyType(
    {
        "mainnet": NetworkDescriptor("mainnet", 1, False),
        "goerli": NetworkDescriptor("goerli", 5, True),
        "sepolia": NetworkDescriptor("sepolia", 11155111, True),
    }
)

DEFAULT_NETWORK = PRESET_NETWORKS["mainnet"]

NetworkSelection = Union[str, NetworkConfig, Mapping[str, Any]]


def _network_name_for_chain(chain_id: int) -> str:
    for name, descriptor in PRESET_NETWORKS.items():
        if descriptor.network_id == chain_id:
            return name
    return UNKNOWN_NETWORK_NAME


def query_local_network(
    rpc_url: str = DEFAULT_LOCAL_RPC_URL, timeout: int = LOCAL_RPC_TIMEOUT
) -> NetworkDescriptor:
    """
    Ask a locally running chain node for its chain id.

    Sends an `eth_chainId` JSON-RPC request and names the network after the
    matching preset, or "unknown" for development chains. Local networks are
    always marked as test networks.

    Raises:
        NetworkUnreachableError: If the node cannot be reached or returns an
            error or malformed result.
    """
    payload = {"jsonrpc": "2.0", "method": "eth_chainId", "params": [], "id": 1}
    logger.debug(f"Querying local network metadata from {rpc_url}")
    try:
        response = requests.post(
            rpc_url,
            json=payload,
            timeout=timeout,
            headers={"User-Agent": get_user_agent()},
        )
        response.raise_for_status()
        body = response.json()
        if "error" in body:
            raise ValueError(f"JSON-RPC error: {body['error']}")
        chain_id = int(body["result"], 16)
    except (requests.RequestException, ValueError, KeyError, TypeError) as e:
        raise NetworkUnreachableError(
            f"[set_network] Unable to query local network at {rpc_url}",
            rpc_url=rpc_url,
            details=str(e),
        ) from e

    return NetworkDescriptor(
        network_name=_network_name_for_chain(chain_id),
        network_id=chain_id,
        is_testnet=True,
    )


def _descriptor_from_config(
    network: Union[NetworkConfig, Mapping[str, Any]],
) -> NetworkDescriptor:
    if isinstance(network, NetworkConfig):
        name, chain_id, is_testnet = (
            network.network_name,
            network.chain_id,
            network.is_testnet,
        )
    else:
        name = network.get("networkName")
        chain_id = network.get("chainId")
        is_testnet = network.get("isTestnet")

    if not isinstance(is_testnet, bool):
        raise ConfigurationError(
            f"[set_network] isTestnet must be true or false for network {name!r}",
            details=f"got {is_testnet!r}",
        )

    try:
        network_id = int(chain_id)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"[set_network] Invalid chain id {chain_id!r} for network {name!r}",
            details=str(e),
        ) from e

    return NetworkDescriptor(
        network_name=name,
        network_id=network_id,
        is_testnet=is_testnet,
    )


class NetworkRegistry:
    """
    Holds the currently selected network.

    The selection is replaced as a whole by set_network(); descriptors are
    immutable so values returned by get_network() never change afterwards.
    """

    def __init__(
        self,
        initial: Optional[NetworkDescriptor] = None,
        rpc_url: Optional[str] = None,
    ):
        self._selected = initial or DEFAULT_NETWORK
        self.rpc_url = rpc_url or DEFAULT_LOCAL_RPC_URL

    def set_network(self, network: NetworkSelection) -> NetworkDescriptor:
        """
        Select the network for the test run.

        Parameters:
            network: A preset key ("mainnet", "goerli", "sepolia"), the
                literal "localhost", or a custom network given as a
                NetworkConfig or a `{networkName, chainId, isTestnet}` mapping.

        Returns:
            NetworkDescriptor: The newly selected network. Any other string is
            ignored with a warning and the current selection is returned.

        Raises:
            NetworkUnreachableError: If "localhost" is requested and the node cannot be queried.
            ConfigurationError: If a custom network's chain id is not numeric or
                its isTestnet value is not a bool.
        """
        logger.debug(f"Setting network to {network!r}")

        if isinstance(network, str):
            if network in PRESET_NETWORKS:
                selected = PRESET_NETWORKS[network]
            elif network == LOCALHOST_NETWORK:
                selected = query_local_network(self.rpc_url)
            else:
                # TODO: resolve custom networks previously added by name
                logger.warning(
                    f"Unknown network '{network}', keeping {self._selected.network_name}"
                )
                return self._selected
        else:
            selected = _descriptor_from_config(network)

        self._selected = selected
        return selected

    def get_network(self) -> NetworkDescriptor:
        logger.debug(f"Current network data: {self._selected.to_dict()}")
        return self._selected
