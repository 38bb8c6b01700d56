"""Query gateway exposing catalog and search operations."""

from lorekeeper.gateway.service import QueryGateway

__all__ = ["QueryGateway"]
