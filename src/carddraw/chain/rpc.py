"""
JSON-RPC client.

Small httpx-based client covering the eth_* methods the workflows use:
reads, nonce/gas lookups, raw transaction submission and receipt polling.
One client is opened per invocation and closed when the command ends.
"""

from __future__ import annotations

import time
from typing import Any, Optional

import httpx

from ..errors import ConfigError, ReceiptTimeoutError, RpcError


def _to_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    return int(value, 16)


class RpcClient:
    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._request_id = 0

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def call(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: On transport failure, non-2xx status or an error object
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._request_id,
        }

        try:
            response = self._client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise RpcError(f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise RpcError(f"{method} returned a non-JSON response") from exc

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                message = error.get("message", str(error))
                code = error.get("code")
            else:
                message, code = str(error), None
            raise RpcError(f"{method} failed: {message}", code=code)

        return data.get("result")

    def chain_id(self) -> int:
        return _to_int(self.call("eth_chainId", []))

    def get_balance(self, address: str) -> int:
        """Balance in wei."""
        return _to_int(self.call("eth_getBalance", [address, "latest"]))

    def get_nonce(self, address: str, block: str = "pending") -> int:
        return _to_int(self.call("eth_getTransactionCount", [address, block]))

    def get_gas_price(self) -> int:
        return _to_int(self.call("eth_gasPrice", []))

    def get_code(self, address: str) -> str:
        return self.call("eth_getCode", [address, "latest"]) or "0x"

    def eth_call(self, to: str, data: str) -> str:
        return self.call("eth_call", [{"to": to, "data": data}, "latest"]) or "0x"

    def send_raw_transaction(self, raw_tx: str) -> str:
        """Send a signed raw transaction; returns the 0x-prefixed tx hash."""
        return self.call("eth_sendRawTransaction", [raw_tx])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return self.call("eth_getTransactionReceipt", [tx_hash])

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: Optional[float] = None,
        poll_interval: float = 2.0,
    ) -> dict:
        """
        Wait for a transaction receipt.

        Args:
            tx_hash: Transaction hash
            timeout: Maximum wait in seconds; None waits until mined
            poll_interval: Polling interval in seconds

        Raises:
            ReceiptTimeoutError: If a timeout is given and expires
        """
        start = time.monotonic()
        while True:
            receipt = self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if timeout is not None and time.monotonic() - start >= timeout:
                raise ReceiptTimeoutError(tx_hash, timeout)
            time.sleep(poll_interval)


def check_chain_id(rpc: RpcClient, expected: Optional[int]) -> int:
    """
    Return the node's chain id, failing if it differs from the configured one.

    Raises:
        ConfigError: The endpoint serves a different chain than configured
    """
    actual = rpc.chain_id()
    if expected is not None and actual != expected:
        raise ConfigError(
            f"RPC endpoint is on chain {actual} but chain {expected} is configured. "
            f"Check RPC_URL, NETWORK and CHAIN_ID."
        )
    return actual
