"""Strategy adapters - tag rules, JSON schema and custom validation methods."""

from .interface import InterfaceStrategy
from .schema import SchemaStrategy
from .schema_cache import SchemaCache, SchemaCacheEntry, compile_schema
from .tags import Constraint, TagStrategy

__all__ = [
    "Constraint",
    "InterfaceStrategy",
    "SchemaCache",
    "SchemaCacheEntry",
    "SchemaStrategy",
    "TagStrategy",
    "compile_schema",
]
