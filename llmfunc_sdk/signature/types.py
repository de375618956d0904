"""Descriptor types produced by the signature parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

CLAUDE = "claude"

# Every synthesized property is modeled as a string.
PROPERTY_TYPE = "string"


def schema_key(provider: str) -> str:
    """Return the field that holds the parameter schema for *provider*."""
    return "input_schema" if provider == CLAUDE else "parameters"


@dataclass(frozen=True)
class ArgumentDescriptor:
    """A single declared argument.

    Attributes:
        name: Bare argument name (without the ``*`` marker).
        description: Text following ``name:`` in the argument comment.
        optional: True iff the declaration prefixed the name with ``*``.
    """

    name: str
    description: str = ""
    optional: bool = False


@dataclass(frozen=True)
class FunctionDescriptor:
    """Intermediate form of one function signature.

    Attributes:
        name: Function identifier.
        description: First function-comment line.
        arguments: Arguments in declaration order.
    """

    name: str
    description: str = ""
    arguments: List[ArgumentDescriptor] = field(default_factory=list)

    @property
    def required(self) -> List[str]:
        """Names of the non-optional arguments, in declaration order."""
        return [a.name for a in self.arguments if not a.optional]

    def parameters(self) -> Dict[str, Any]:
        """The provider-independent inner parameter object."""
        properties: Dict[str, Any] = {}
        for a in self.arguments:
            properties[a.name] = {
                "type": PROPERTY_TYPE,
                "description": a.description,
            }
        return {
            "type": "object",
            "properties": properties,
            "required": self.required,
        }

    def to_schema(self, provider: str) -> Dict[str, Any]:
        """Render this descriptor as a schema fragment for *provider*.

        ``"claude"`` uses ``input_schema``; every other id uses ``parameters``.
        """
        return {
            "name": self.name,
            "description": self.description,
            schema_key(provider): self.parameters(),
        }
