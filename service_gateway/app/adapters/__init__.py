"""
Adapters package for the Gateway Service.

Contains the client for the backend RPC service and the message shapes of
its contract. Adapters encapsulate:

- Base URLs and request shapes
- Decoding of backend status codes into ``RpcError``

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .backend_client import BackendClient
from .rpc import RpcCode, RpcError

__all__ = [
    "BackendClient",
    "RpcCode",
    "RpcError",
]
