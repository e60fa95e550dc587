# core/permissions.py

"""
Role → capability table plus per-user override patches.

Effective permissions for a session are always computed as

    apply_overrides(get_permissions_for_role(role), overrides)

Both steps are pure and never raise: unknown roles behave like "user",
and unknown keys inside an override document are ignored.
"""

from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from models.enums import LogColumn, Role, Section


# ============================================
# EFFECTIVE PERMISSION SET
# ============================================
class RolePermissions(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sections: FrozenSet[Section] = frozenset()
    log_columns: FrozenSet[LogColumn] = Field(frozenset(), alias="logColumns")
    can_create_quote: bool = Field(False, alias="canCreateQuote")
    can_edit_quote: bool = Field(False, alias="canEditQuote")

    # Sets serialize in enum order so API responses are stable
    @field_serializer("sections")
    def _dump_sections(self, value):
        return [s.value for s in Section if s in value]

    @field_serializer("log_columns")
    def _dump_log_columns(self, value):
        return [c.value for c in LogColumn if c in value]


ALL_SECTIONS = frozenset(Section)
ALL_LOG_COLUMNS = frozenset(LogColumn)

# Exposed for the permission editor
LOG_COLUMNS = [c.value for c in LogColumn]


# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
BASE_PERMISSIONS: Mapping[Role, RolePermissions] = MappingProxyType({

    # =====================================================
    # ADMIN — everything, including user administration
    # =====================================================
    Role.admin: RolePermissions(
        sections=ALL_SECTIONS,
        log_columns=ALL_LOG_COLUMNS,
        can_create_quote=True,
        can_edit_quote=True,
    ),

    # =====================================================
    # USER — everything except the admin panel
    # =====================================================
    Role.user: RolePermissions(
        sections=ALL_SECTIONS - {Section.admin},
        log_columns=ALL_LOG_COLUMNS,
        can_create_quote=True,
        can_edit_quote=True,
    ),

    # =====================================================
    # LECTOR — read-only, no offer amount or currency
    # =====================================================
    Role.lector: RolePermissions(
        sections=frozenset({Section.dashboard, Section.log}),
        log_columns=ALL_LOG_COLUMNS - {LogColumn.oferta_usd, LogColumn.moneda},
        can_create_quote=False,
        can_edit_quote=False,
    ),

    # =====================================================
    # PENDING — awaiting approval, sees nothing
    # =====================================================
    Role.pending: RolePermissions(),
})

DEFAULT_ROLE = Role.user


def get_permissions_for_role(role: Union[Role, str, None]) -> RolePermissions:
    """
    Base permissions for a role. Null, empty or unknown roles fall back
    to the "user" role (not to "pending").
    """
    try:
        key = Role(role)
    except ValueError:
        return BASE_PERMISSIONS[DEFAULT_ROLE]
    return BASE_PERMISSIONS[key]


# ============================================
# PER-USER OVERRIDES (profiles.permissions JSON)
# ============================================
def _known_keys(raw: Any, enum_cls) -> Optional[Dict[Any, bool]]:
    if not isinstance(raw, dict):
        return None

    cleaned = {}
    for key, value in raw.items():
        if not isinstance(value, bool):
            continue
        try:
            cleaned[enum_cls(key)] = value
        except ValueError:
            # forward-compatible: unknown keys are dropped
            continue
    return cleaned


class PermissionOverrides(BaseModel):
    """
    Patch document stored per user.

    true forces a section/column visible, false forces it hidden,
    an absent key (or a null boolean) defers to the role default.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    sections: Optional[Dict[Section, bool]] = None
    log_columns: Optional[Dict[LogColumn, bool]] = Field(None, alias="logColumns")
    can_create_quote: Optional[bool] = Field(None, alias="canCreateQuote")
    can_edit_quote: Optional[bool] = Field(None, alias="canEditQuote")

    @field_validator("sections", mode="before")
    @classmethod
    def _clean_sections(cls, v):
        return _known_keys(v, Section)

    @field_validator("log_columns", mode="before")
    @classmethod
    def _clean_log_columns(cls, v):
        return _known_keys(v, LogColumn)

    @field_validator("can_create_quote", "can_edit_quote", mode="before")
    @classmethod
    def _clean_flag(cls, v):
        return v if isinstance(v, bool) else None


OverridesInput = Union[PermissionOverrides, Mapping[str, Any], None]


def parse_overrides(raw: OverridesInput) -> Optional[PermissionOverrides]:
    """Accepts a model, the stored JSON document, or None."""
    if raw is None or isinstance(raw, PermissionOverrides):
        return raw
    if not isinstance(raw, Mapping):
        return None
    return PermissionOverrides.model_validate(dict(raw))


def _patch(current: FrozenSet, patch: Optional[Dict[Any, bool]]) -> FrozenSet:
    if not patch:
        return current

    working = set(current)
    for key, value in patch.items():
        if value:
            working.add(key)
        else:
            working.discard(key)
    return frozenset(working)


def apply_overrides(base: RolePermissions, overrides: OverridesInput) -> RolePermissions:
    """
    Merge a user's override patch into the role's base permissions.
    Each field is merged independently; inputs are never mutated.
    """
    patch = parse_overrides(overrides)
    if patch is None:
        return base

    can_create = base.can_create_quote
    if patch.can_create_quote is not None:
        can_create = patch.can_create_quote

    can_edit = base.can_edit_quote
    if patch.can_edit_quote is not None:
        can_edit = patch.can_edit_quote

    return RolePermissions(
        sections=_patch(base.sections, patch.sections),
        log_columns=_patch(base.log_columns, patch.log_columns),
        can_create_quote=can_create,
        can_edit_quote=can_edit,
    )


def resolve_permissions(role: Union[Role, str, None], overrides: OverridesInput = None) -> RolePermissions:
    return apply_overrides(get_permissions_for_role(role), overrides)


# -----------------------------------------------------
# Derived queries
# -----------------------------------------------------
def can_see_section(perms: RolePermissions, section: Union[Section, str]) -> bool:
    return section in perms.sections


def can_see_column(perms: RolePermissions, column: Union[LogColumn, str]) -> bool:
    return column in perms.log_columns


def can_create_quote(perms: RolePermissions) -> bool:
    return perms.can_create_quote


def can_edit_quote(perms: RolePermissions) -> bool:
    return perms.can_edit_quote


# ============================================
# OVERRIDE EDITING
# ============================================
def _toggle(base_set: FrozenSet, current: Optional[Dict[Any, bool]], key) -> Optional[Dict[Any, bool]]:
    base_has = key in base_set
    stored = (current or {}).get(key)
    new_value = not (stored if stored is not None else base_has)

    updated = dict(current or {})
    # a value equal to the role default is not an override
    if new_value == base_has:
        updated.pop(key, None)
    else:
        updated[key] = new_value

    return updated or None


def toggle_log_column(
    base: RolePermissions,
    overrides: OverridesInput,
    column: Union[LogColumn, str],
) -> PermissionOverrides:
    """Flip the effective visibility of one log column."""
    current = parse_overrides(overrides) or PermissionOverrides()
    column = LogColumn(column)
    return current.model_copy(
        update={"log_columns": _toggle(base.log_columns, current.log_columns, column)}
    )


def toggle_section(
    base: RolePermissions,
    overrides: OverridesInput,
    section: Union[Section, str],
) -> PermissionOverrides:
    """Flip the effective visibility of one section."""
    current = parse_overrides(overrides) or PermissionOverrides()
    section = Section(section)
    return current.model_copy(
        update={"sections": _toggle(base.sections, current.sections, section)}
    )


def canonicalize(overrides: OverridesInput) -> Optional[dict]:
    """
    Stored JSON shape of an override patch.
    Returns None when the patch reduces to "no overrides".
    """
    patch = parse_overrides(overrides)
    if patch is None:
        return None

    doc: Dict[str, Any] = {}
    if patch.sections:
        doc["sections"] = {k.value: v for k, v in patch.sections.items()}
    if patch.log_columns:
        doc["logColumns"] = {k.value: v for k, v in patch.log_columns.items()}
    if patch.can_create_quote is not None:
        doc["canCreateQuote"] = patch.can_create_quote
    if patch.can_edit_quote is not None:
        doc["canEditQuote"] = patch.can_edit_quote

    return doc or None
