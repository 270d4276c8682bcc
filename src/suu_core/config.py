"""Network and contract configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

NETWORKS = ("mainnet", "testnet", "devnet", "localnet")

# Published deployments of the suu contract.
_DEPLOYMENTS: dict[str, dict[str, str]] = {
    "mainnet": {
        "package_id": "0x8ba4d7710351b6ef3044515d206625dc26116712eac155003e9813350fd46421",
        "object_id": "0x56a57376fb68d041723b1119f5b9d7f6a1863c0331d0f215506f6e78ba5e4e14",
        "banker_address": "0xbed3a24d91f2fb75ab90d6dfddbfc5f59a7a4b62f5779c1118dc22ab176fca44",
    },
    "testnet": {
        "package_id": "0x7ceff956432740658ada869243d30cf30bbc76bfba703669ee264a047cd930ab",
        "object_id": "0xf43fd10d5892124eb8eb5b8e61fda0d2c8c7a524d594d00a7585088da1a4063e",
        "banker_address": "0xbed3a24d91f2fb75ab90d6dfddbfc5f59a7a4b62f5779c1118dc22ab176fca44",
    },
}

MODULE_NAME = "suu"
RANDOM_OBJECT_ID = "0x8"
CLOCK_OBJECT_ID = "0x6"


@dataclass(frozen=True)
class ContractConfig:
    """Where the contract lives on a given network."""

    network: str
    package_id: str
    object_id: str
    banker_address: str
    module: str = MODULE_NAME

    def target(self, function: str) -> str:
        """Fully-qualified Move call target, e.g. ``0x..::suu::buy_nft``."""
        return f"{self.package_id}::{self.module}::{function}"

    def event_type(self, event: str) -> str:
        return f"{self.package_id}::{self.module}::{event}"

    @classmethod
    def for_network(cls, network: str) -> ContractConfig:
        """Published addresses; every network but mainnet uses the testnet deploy."""
        if network not in NETWORKS:
            msg = f"Unknown network '{network}', expected one of {', '.join(NETWORKS)}"
            raise ValueError(msg)
        deploy = _DEPLOYMENTS["mainnet" if network == "mainnet" else "testnet"]
        return cls(network=network, **deploy)


def load_contract_config() -> ContractConfig:
    """Build the contract config from the environment.

    ``SUU_NETWORK`` selects the deployment (default ``testnet``);
    ``SUU_PACKAGE_ID``, ``SUU_OBJECT_ID`` and ``SUU_BANKER_ADDRESS``
    override individual addresses.
    """
    network = os.getenv("SUU_NETWORK")
    if not network:
        network = "testnet"
        logger.warning("SUU_NETWORK not set, defaulting to %s", network)
    base = ContractConfig.for_network(network)
    config = ContractConfig(
        network=network,
        package_id=os.getenv("SUU_PACKAGE_ID", base.package_id),
        object_id=os.getenv("SUU_OBJECT_ID", base.object_id),
        banker_address=os.getenv("SUU_BANKER_ADDRESS", base.banker_address),
    )
    logger.info("Using %s contract %s", config.network, config.package_id)
    return config
