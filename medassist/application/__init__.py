"""
Application layer.

Stateless orchestrators that drive conversation use cases through the
session store and the upstream language model adapters.
"""
