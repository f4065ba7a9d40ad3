"""Response envelope returned by the synthesis transport.

The envelope is a tagged union over three shapes. Structured responses are
converted into an explicit recursive node tree so the locator walks typed
nodes instead of probing untyped values.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class MappingNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["mapping"] = "mapping"
    entries: dict[str, "PayloadNode"] = {}


class SequenceNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["sequence"] = "sequence"
    items: list["PayloadNode"] = []


class ScalarNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["scalar"] = "scalar"
    value: str | bool | int | float | None = None


PayloadNode = Annotated[Union[MappingNode, SequenceNode, ScalarNode], Field(discriminator="kind")]

MappingNode.model_rebuild()
SequenceNode.model_rebuild()


def to_payload_node(value: Any) -> MappingNode | SequenceNode | ScalarNode:
    """Convert a parsed JSON value into a payload node tree.

    Args:
        value (Any): Output of ``json.loads`` (dicts, lists and primitives).

    Returns:
        MappingNode | SequenceNode | ScalarNode: The root node.

    Raises:
        TypeError: If the value contains something JSON cannot produce.
    """
    # post-order walk on an explicit stack, children land on `built` before their parent
    built: list[MappingNode | SequenceNode | ScalarNode] = []
    work: list[tuple[Any, bool]] = [(value, False)]
    while work:
        current, children_ready = work.pop()
        if isinstance(current, (dict, list, tuple)):
            children = list(current.values()) if isinstance(current, dict) else list(current)
            if not children_ready:
                work.append((current, True))
                work.extend((child, False) for child in reversed(children))
                continue
            start = len(built) - len(children)
            nodes = built[start:]
            del built[start:]
            if isinstance(current, dict):
                built.append(MappingNode(entries={str(key): node for key, node in zip(current.keys(), nodes)}))
            else:
                built.append(SequenceNode(items=nodes))
        elif current is None or isinstance(current, (str, bool, int, float)):
            built.append(ScalarNode(value=current))
        else:
            raise TypeError(f"Unsupported payload value of type '{type(current).__name__}'.")
    return built[0]


class BinaryPayload(BaseModel):
    """Uninterpreted byte blob plus the content type the transport declared."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["binary"] = "binary"
    content: bytes
    content_type: str = "application/octet-stream"


class StructuredPayload(BaseModel):
    """Arbitrarily nested mapping/sequence of primitives."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["structured"] = "structured"
    root: PayloadNode

    @classmethod
    def from_value(cls, value: Any) -> "StructuredPayload":
        return cls(root=to_payload_node(value))


class TextPayload(BaseModel):
    """Plain text body, possibly JSON-encoded."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


ResponseEnvelope = Annotated[Union[BinaryPayload, StructuredPayload, TextPayload], Field(discriminator="kind")]
