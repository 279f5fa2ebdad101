"""
Scene layer: renderer-facing proxies for tracked elements.
"""

from .proxy import ElementProxy, ProxyScene, describe_category

__all__ = ["ElementProxy", "ProxyScene", "describe_category"]
