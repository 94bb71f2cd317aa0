"""Injectable, namespace-scoped middleware."""

from storekit.middleware.chain import InjectedMiddlewareAPI, MiddlewareChain, compose_middleware
from storekit.middleware.enhancer import make_middleware_enhancer, store_interface

__all__ = [
    "InjectedMiddlewareAPI",
    "MiddlewareChain",
    "compose_middleware",
    "make_middleware_enhancer",
    "store_interface",
]
