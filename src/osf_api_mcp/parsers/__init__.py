"""Parsers for API documentation formats."""

from .swagger import SwaggerParser

__all__ = ["SwaggerParser"]
