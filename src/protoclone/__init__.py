"""protoclone - prototype-based objects built by cloning and delegation."""

from protoclone.compiler import compile_properties
from protoclone.config import CloneConfig, configure, reset_config
from protoclone.descriptors import ABSENT, AttributeRecord
from protoclone.dispatch import (
    NoSuchMethodError,
    SuperCursor,
    apply_super,
    call_super,
    create_super_safe_callback,
)
from protoclone.dump import state_to_dict, to_json
from protoclone.engine import (
    Capability,
    DeepMode,
    can,
    cant,
    clone,
    copy,
    create,
    define_properties,
    get_state,
    mix,
)
from protoclone.host import IllegalMutationError, ProtoObject
from protoclone.root import ROOT

__all__ = [
    # Root object
    "ROOT",
    "ProtoObject",
    # Delegation engine
    "clone",
    "create",
    "copy",
    "mix",
    "define_properties",
    "get_state",
    "can",
    "cant",
    "Capability",
    "DeepMode",
    # Descriptor compiler
    "compile_properties",
    "AttributeRecord",
    "ABSENT",
    # Super dispatch
    "apply_super",
    "call_super",
    "create_super_safe_callback",
    "SuperCursor",
    # Errors
    "IllegalMutationError",
    "NoSuchMethodError",
    # Configuration and output
    "CloneConfig",
    "configure",
    "reset_config",
    "state_to_dict",
    "to_json",
]

__version__ = "0.1.0"
