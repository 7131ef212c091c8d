"""Field-level patch authorization engine."""

from .authorization import (
    DEFAULT_ADMIN_PRIVILEGE,
    AuthContext,
    edit_privilege_name,
    field_privilege_name,
)
from .decision import (
    DENIED_FIELDS_HEADER,
    Approved,
    FieldViolation,
    NonPatchableFieldViolation,
    PatchDecision,
    ProtectedFieldViolation,
    Rejected,
    ViolationKind,
    denied_fields_header,
)
from .documents import PatchOperation, apply_json_patch, apply_merge_patch, parse_patch
from .exceptions import (
    AccessorError,
    InvalidPatchError,
    MetadataResolutionError,
    PatchError,
    PatchRejectedError,
    TypeMismatchError,
)
from .merge import MergeApplier
from .metadata import (
    EntityMetadata,
    FieldMetadata,
    FieldMetadataRegistry,
    FieldRule,
    resolve_entity_metadata,
)
from .validator import PatchValidator, values_equal

__all__ = [
    "DEFAULT_ADMIN_PRIVILEGE",
    "DENIED_FIELDS_HEADER",
    "AccessorError",
    "Approved",
    "AuthContext",
    "EntityMetadata",
    "FieldMetadata",
    "FieldMetadataRegistry",
    "FieldRule",
    "FieldViolation",
    "InvalidPatchError",
    "MergeApplier",
    "MetadataResolutionError",
    "NonPatchableFieldViolation",
    "PatchDecision",
    "PatchError",
    "PatchOperation",
    "PatchRejectedError",
    "PatchValidator",
    "ProtectedFieldViolation",
    "Rejected",
    "TypeMismatchError",
    "ViolationKind",
    "apply_json_patch",
    "apply_merge_patch",
    "denied_fields_header",
    "edit_privilege_name",
    "field_privilege_name",
    "parse_patch",
    "resolve_entity_metadata",
    "values_equal",
]
