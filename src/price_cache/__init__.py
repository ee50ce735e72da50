"""
Steam Price Cache.

Keeps a local snapshot of IsThereAnyDeal prices for a Steam game
catalog, resolving only the games the previous snapshot does not
already know about.
"""

__version__ = "0.1.0"
