"""
Configuration for carddraw.

Everything comes from the process environment, optionally seeded from a
``.env`` file.  A ``ChainConfig`` is built once per invocation and passed
explicitly into every workflow; nothing here is cached at module level.

Variables:
    RPC_URL          JSON-RPC endpoint (API_URL is accepted as a fallback)
    PRIVATE_KEY      hex private key of the signing account
    NETWORK          network name (default: sepolia)
    CHAIN_ID         chain id; derived from NETWORK when unset
    DEPLOYMENT_FILE  deployment record path (default: deployment.json)
    CARD_CATALOG     card catalog path (default: cards.json)
    RPC_TIMEOUT      per-request HTTP timeout in seconds (default: 30)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_NETWORK = "sepolia"
DEFAULT_DEPLOYMENT_FILE = "deployment.json"
DEFAULT_CARD_CATALOG = "cards.json"
DEFAULT_RPC_TIMEOUT = 30.0

KNOWN_CHAIN_IDS: dict[str, int] = {
    "mainnet": 1,
    "sepolia": 11155111,
    "holesky": 17000,
    "hardhat": 31337,
    "localhost": 31337,
}


@dataclass(frozen=True)
class ChainConfig:
    rpc_url: str
    private_key: Optional[str]
    network: str = DEFAULT_NETWORK
    chain_id: Optional[int] = None
    deployment_path: Path = Path(DEFAULT_DEPLOYMENT_FILE)
    catalog_path: Path = Path(DEFAULT_CARD_CATALOG)
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT

    def require_private_key(self) -> str:
        if not self.private_key:
            raise ConfigError(
                "PRIVATE_KEY not set. Add it to the environment or your .env file."
            )
        return self.private_key


def normalize_private_key(value: str) -> str:
    key = value.strip()
    if not key.startswith("0x"):
        key = "0x" + key
    body = key[2:]
    if len(body) != 64 or any(c not in "0123456789abcdefABCDEF" for c in body):
        raise ConfigError("PRIVATE_KEY must be 32 bytes of hex (64 hex characters)")
    return key


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_config(env_path: Optional[Path] = None, require_key: bool = True) -> ChainConfig:
    """
    Build a ChainConfig from the environment.

    Args:
        env_path: Explicit .env file.  Its values override the environment.
                  When omitted, a ``.env`` in the working directory is read
                  without overriding variables that are already set.
        require_key: Fail when PRIVATE_KEY is missing.

    Raises:
        ConfigError: On any missing or malformed value.
    """
    if env_path is not None:
        if not env_path.exists():
            raise ConfigError(f"Env file not found: {env_path}")
        load_dotenv(env_path, override=True)
    else:
        load_dotenv(Path.cwd() / ".env", override=False)

    rpc_url = _env("RPC_URL") or _env("API_URL")
    if not rpc_url:
        raise ConfigError(
            "RPC_URL not set. Point it at a JSON-RPC endpoint, "
            "e.g. RPC_URL=https://sepolia.infura.io/v3/<project-id>"
        )
    if not rpc_url.startswith(("http://", "https://")):
        raise ConfigError(f"RPC_URL must be an http(s) URL, got {rpc_url!r}")

    raw_key = _env("PRIVATE_KEY")
    private_key = normalize_private_key(raw_key) if raw_key else None
    if require_key and private_key is None:
        raise ConfigError(
            "PRIVATE_KEY not set. Add it to the environment or your .env file."
        )

    network = (_env("NETWORK") or DEFAULT_NETWORK).lower()

    raw_chain_id = _env("CHAIN_ID")
    if raw_chain_id is not None:
        try:
            chain_id: Optional[int] = int(raw_chain_id, 0)
        except ValueError:
            raise ConfigError(f"CHAIN_ID must be an integer, got {raw_chain_id!r}")
    else:
        chain_id = KNOWN_CHAIN_IDS.get(network)

    raw_timeout = _env("RPC_TIMEOUT")
    try:
        rpc_timeout = float(raw_timeout) if raw_timeout else DEFAULT_RPC_TIMEOUT
    except ValueError:
        raise ConfigError(f"RPC_TIMEOUT must be a number of seconds, got {raw_timeout!r}")

    return ChainConfig(
        rpc_url=rpc_url,
        private_key=private_key,
        network=network,
        chain_id=chain_id,
        deployment_path=Path(_env("DEPLOYMENT_FILE") or DEFAULT_DEPLOYMENT_FILE),
        catalog_path=Path(_env("CARD_CATALOG") or DEFAULT_CARD_CATALOG),
        rpc_timeout=rpc_timeout,
    )
