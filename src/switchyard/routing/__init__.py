"""Routing — composable router trees and the endpoint map.

Routers are built during setup and frozen when the app starts. The
tree is compiled into a trie ``RouteTable`` for request matching, and
walked by ``build_endpoint_map`` for the api map.
"""

from switchyard.routing.endpoints import Endpoint, EndpointMap, build_endpoint_map
from switchyard.routing.route import Route, RouteMatch
from switchyard.routing.router import Router, join_url
from switchyard.routing.table import RouteTable
from switchyard.routing.tree import flatten_routers, relative_route

__all__ = [
    "Endpoint",
    "EndpointMap",
    "Route",
    "RouteMatch",
    "RouteTable",
    "Router",
    "build_endpoint_map",
    "flatten_routers",
    "join_url",
    "relative_route",
]
