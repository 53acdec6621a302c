"""Domain Types - kinds and identifiers shared by the registration and call paths.

Invariants:
    - ParamKind and ReturnKind are the only vocabulary used to describe a handler shape
    - DEFAULT_NAMESPACE ("") is the namespace of a group that never called set_namespace
    - SYSTEM_NAMESPACE is reserved for the built-in metadata contract
    - NAMESPACE_SEPARATOR splits "namespace:function" on its LAST occurrence

Design Decisions:
    - NewType over wrapper classes: zero runtime cost
    - str Enums: serialize to JSON without custom encoders (metadata endpoint)
"""

from enum import Enum
from typing import NewType


# --- Identity Types --------------------------------------------------------

Namespace = NewType("Namespace", str)
FunctionName = NewType("FunctionName", str)
QualifiedName = NewType("QualifiedName", str)
TxId = NewType("TxId", str)


# --- Constants -------------------------------------------------------------

DEFAULT_NAMESPACE = Namespace("")
SYSTEM_NAMESPACE = Namespace("org.hyperledger.fabric")
NAMESPACE_SEPARATOR = ":"


# --- Enums -----------------------------------------------------------------

class ParamKind(str, Enum):
    """What a handler parameter receives."""
    CONTEXT = "context"
    SCALAR = "scalar"        # one input string, optionally converted
    SEQUENCE = "sequence"    # every remaining input string


class ReturnKind(str, Enum):
    """What a handler returns, in order."""
    STRING = "string"
    ERROR = "error"


class LifecycleStage(str, Enum):
    """Stages an invocation passes through."""
    START = "start"
    BEFORE = "before"
    DISPATCH = "dispatch"
    UNKNOWN = "unknown"
    AFTER = "after"
    DONE = "done"


def qualify(namespace: str, function: str) -> QualifiedName:
    """Join namespace and function into the routing key."""
    if not namespace:
        return QualifiedName(function)
    return QualifiedName(f"{namespace}{NAMESPACE_SEPARATOR}{function}")


def split_qualified_name(name: str) -> tuple[Namespace, FunctionName]:
    """Split "ns:fn" on the last separator. No separator -> default namespace."""
    namespace, sep, function = name.rpartition(NAMESPACE_SEPARATOR)
    if not sep:
        return DEFAULT_NAMESPACE, FunctionName(name)
    return Namespace(namespace), FunctionName(function)
