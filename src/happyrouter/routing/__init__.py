"""Routing — method/path dispatch for compiled middleware chains.

Path patterns are compiled by starlette; this package only decides which
registered chains run for a request and answers ``Allow``/405/501.
"""

from happyrouter.routing.layer import Layer, RouteMatch
from happyrouter.routing.router import Router

__all__ = ["Layer", "RouteMatch", "Router"]
