"""Route group exports."""

from . import graph, health, orders, users

__all__ = ["graph", "health", "orders", "users"]
