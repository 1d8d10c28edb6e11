"""Node HTTP client — Ethereum JSON-RPC transaction and receipt lookups.

Provides an async HTTP client for the two calls the status resolver needs:
- eth_getTransactionByHash — transaction and its block reference
- eth_getTransactionReceipt — execution result of a mined transaction

A ``null`` result means "not found" and is returned as ``None``. Transport
failures, non-200 responses, malformed bodies, bodies with neither
``result`` nor ``error``, and JSON-RPC error objects raise
:class:`DataSourceError`; they are never reported as "not found".
"""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Any

import httpx

from onchain_ops.chain.node.models import OnchainTransaction, TransactionReceipt
from onchain_ops.errors.chain_errors import DataSourceError

if TYPE_CHECKING:
    from onchain_ops.config.settings import NodeConfig
    from onchain_ops.metrics.collector import OperationMetrics

logger = logging.getLogger(__name__)


class NodeService:
    """Async JSON-RPC client used as the blockchain data source.

    One instance can serve any number of concurrent status resolutions; it
    keeps no per-request state apart from the JSON-RPC id counter.

    Usage::

        node = NodeService(config.node)
        await node.connect()
        try:
            tx = await node.get_transaction_by_hash("0xabc...")
        finally:
            await node.close()
    """

    def __init__(self, config: NodeConfig, *, metrics: OperationMetrics | None = None) -> None:
        """Initialize the node service.

        Args:
            config: Node configuration (url, timeout, auth token).
            metrics: Optional metrics sink for query durations.
        """
        self._config = config
        self._metrics = metrics
        self._client: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        headers: dict[str, str] = {
            "Content-Type": "application/json",
        }
        if self._config.auth_token:
            headers["Authorization"] = f"Bearer {self._config.auth_token}"

        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_transaction_by_hash(self, transaction_hash: str) -> OnchainTransaction | None:
        """Look up a transaction by hash.

        Args:
            transaction_hash: 0x-prefixed transaction hash.

        Returns:
            The transaction, or ``None`` if the node does not know it (yet).

        Raises:
            DataSourceError: On transport, HTTP or JSON-RPC errors.
        """
        result = await self._call("eth_getTransactionByHash", [transaction_hash])
        if result is None:
            return None
        return self._parse(OnchainTransaction, result, "eth_getTransactionByHash")

    async def get_transaction_receipt(self, transaction_hash: str) -> TransactionReceipt | None:
        """Look up the execution receipt of a transaction.

        Args:
            transaction_hash: 0x-prefixed transaction hash.

        Returns:
            The receipt, or ``None`` if none is available.

        Raises:
            DataSourceError: On transport, HTTP or JSON-RPC errors.
        """
        result = await self._call("eth_getTransactionReceipt", [transaction_hash])
        if result is None:
            return None
        return self._parse(TransactionReceipt, result, "eth_getTransactionReceipt")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "Node service not connected. Call connect() first."
            raise DataSourceError(msg, status_code=500)
        return self._client

    async def _call(self, method: str, params: list[Any]) -> Any:
        client = self._ensure_connected()
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug("node call %s %s", method, params)

        if self._metrics is not None:
            with self._metrics.track_data_source_query(method):
                response = await self._post(client, self._config.url, method, payload)
        else:
            response = await self._post(client, self._config.url, method, payload)

        if response.status_code != 200:
            raise DataSourceError(
                f"node {method} failed ({response.status_code}): {response.text}",
                status_code=response.status_code if response.status_code >= 500 else 502,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise DataSourceError(f"node {method} returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise DataSourceError(f"node {method} returned an unexpected body")

        error = body.get("error")
        if error:
            detail = error.get("message", error) if isinstance(error, dict) else error
            raise DataSourceError(f"node {method} error: {detail}")
        if "result" not in body:
            raise DataSourceError(f"node {method} returned neither result nor error")
        return body["result"]

    @staticmethod
    async def _post(
        client: httpx.AsyncClient, url: str, method: str, payload: dict[str, Any]
    ) -> httpx.Response:
        try:
            return await client.post(url, json=payload)
        except httpx.HTTPError as exc:
            raise DataSourceError(f"node {method} failed: {exc}") from exc

    @staticmethod
    def _parse(model: Any, result: Any, method: str) -> Any:
        if not isinstance(result, dict):
            raise DataSourceError(f"node {method} returned an unexpected result")
        try:
            return model.from_dict(result)
        except (TypeError, ValueError) as exc:
            raise DataSourceError(f"node {method} returned a malformed result: {exc}") from exc
