"""
Business logic for fighter mutations.

Handlers take model instances and keyword arguments, run in a transaction,
and raise MutationError subclasses. They know nothing about HTTP or result
envelopes; see gangroster.core.gateway for that.
"""
