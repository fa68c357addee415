"""Node key codec.

A node key is the single opaque string that carries a node's identity through
the builder, the visibility reducer, the active path and the UI:
``"<type>:<id>"``. Stage group keys reuse the same shape with a composite id,
``"journey:<outcome id>:<stage id>"``, so decoding splits only at the first
separator and hands back the rest of the key untouched.
"""

from dataclasses import dataclass

KEY_SEPARATOR = ":"
EDGE_SEPARATOR = "->"
OVERFLOW_SUFFIX = "overflow"
GROUP_TYPE = "journey"


@dataclass(frozen=True)
class NodeKey:
    """A decoded node key."""

    type: str
    id: str


def encode_key(node_type: str, node_id: str) -> str:
    return f"{node_type}{KEY_SEPARATOR}{node_id}"


def decode_key(key: object) -> NodeKey | None:
    """Split a key into (type, id), or return None if it is malformed.

    Never raises. The id is everything after the first separator and may
    itself contain separators (group keys).
    """
    if not isinstance(key, str) or not key:
        return None
    node_type, sep, node_id = key.partition(KEY_SEPARATOR)
    if not sep or not node_type or not node_id:
        return None
    return NodeKey(type=node_type, id=node_id)


def encode_group_id(owner_id: str, stage_id: str) -> str:
    return f"{owner_id}{KEY_SEPARATOR}{stage_id}"


def encode_group_key(owner_id: str, stage_id: str) -> str:
    """Key for the stage group of ``stage_id`` under outcome ``owner_id``."""
    return encode_key(GROUP_TYPE, encode_group_id(owner_id, stage_id))


def decode_group_id(group_id: str) -> tuple[str, str] | None:
    """Split a group id back into (owner id, stage id).

    Stage ids never contain the separator, so the split is at the last one;
    owner ids are left intact.
    """
    owner_id, sep, stage_id = group_id.rpartition(KEY_SEPARATOR)
    if not sep or not owner_id or not stage_id:
        return None
    return owner_id, stage_id


def edge_id(source_key: str, target_key: str) -> str:
    return f"{source_key}{EDGE_SEPARATOR}{target_key}"


def overflow_key(parent_key: str) -> str:
    return f"{parent_key}{KEY_SEPARATOR}{OVERFLOW_SUFFIX}"
