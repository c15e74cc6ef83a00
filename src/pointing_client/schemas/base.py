"""
Base Schema Classes

This module provides base classes for request and update schemas with
common serialization and deserialization methods.
"""

import json
from dataclasses import asdict, fields
from typing import Any, Dict, Type, TypeVar

T = TypeVar("T", bound="BaseUpdate")


class BaseRequest:
    """
    Base class for request schemas.

    Provides common serialization methods for converting request objects
    to dictionary and JSON formats.
    """

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary with 'type' key and optional 'data' key.
            If the request has no fields, only 'type' is included.
        """
        if hasattr(self, "__dataclass_fields__") and fields(self):
            return {"type": self._message_type, "data": asdict(self)}
        return {"type": self._message_type}

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict())

    @property
    def _message_type(self) -> str:
        """
        Event name for the request.

        Should be overridden by subclasses to provide the specific type.
        """
        raise NotImplementedError("Subclasses must define _message_type")


class BaseUpdate:
    """
    Base class for server-sent updates.

    Provides common deserialization methods for creating update objects
    from dictionary and JSON formats.
    """

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """
        Create instance from a frame or from its payload.

        Args:
            data: Either the full {"type", "data"} frame or the payload
        """
        if isinstance(data, dict) and "type" in data and "data" in data:
            data = data["data"]
        return cls._from_data(data or {})

    @classmethod
    def from_json(cls: Type[T], json_str: str) -> T:
        """Create instance from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def _from_data(cls: Type[T], data: Dict[str, Any]) -> T:
        """
        Create instance from payload dictionary.

        Should be overridden by subclasses for custom deserialization.
        """
        return cls(**data)
