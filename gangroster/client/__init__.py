"""
Optimistic cache client for fighter mutations.

The cache is updated before the server confirms a change and is reconciled
or rolled back once the gateway answers.
"""

from gangroster.client.cache import QueryCache
from gangroster.client.mutations import FighterMutations
from gangroster.client.optimistic import OptimisticMutation, RetryPolicy
from gangroster.client.transport import HttpTransport, LocalTransport, TransportError

__all__ = [
    "FighterMutations",
    "HttpTransport",
    "LocalTransport",
    "OptimisticMutation",
    "QueryCache",
    "RetryPolicy",
    "TransportError",
]
