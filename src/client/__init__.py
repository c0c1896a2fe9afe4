"""
Resource Client Abstraction.

원격 API 교체 가능하게 설계. base_url/timeout은 config만 SSOT.
"""

from .base import ClientFailure, ClientResult, ResourceClient
from .http import HttpResourceClient
from .memory import InMemoryResourceClient

__all__ = [
    "ClientFailure",
    "ClientResult",
    "ResourceClient",
    "HttpResourceClient",
    "InMemoryResourceClient",
]
