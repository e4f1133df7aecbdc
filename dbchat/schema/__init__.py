"""Schema introspection."""

from dbchat.schema.introspector import SchemaIntrospector

__all__ = ["SchemaIntrospector"]
