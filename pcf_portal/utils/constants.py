"""
Application constants following kkb_fastapi pattern.
"""
from enum import Enum


class ConfigFile:
    """Configuration file paths."""
    PRODUCTION = "production.toml"
    DEVELOPMENT = "development.toml"
    TEST = "test.toml"


class SharingStatus(str, Enum):
    """Product sharing request status as reported by the backend."""
    NOT_REQUESTED = "Not requested"
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class LifecycleStage(str, Enum):
    """EN 15804 lifecycle stages accepted for emission factors."""
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"
    A4 = "A4"
    A5 = "A5"
    A1_A3 = "A1-A3"
    A4_A5 = "A4-A5"
    B1 = "B1"
    B2 = "B2"
    B3 = "B3"
    B4 = "B4"
    B5 = "B5"
    B6 = "B6"
    B7 = "B7"
    B1_B7 = "B1-B7"
    C1 = "C1"
    C2 = "C2"
    C3 = "C3"
    C4 = "C4"
    C1_C4 = "C1-C4"
    C2_C4 = "C2-C4"
    D = "D"
    OTHER = "Other"


LIFECYCLE_STAGE_VALUES = frozenset(stage.value for stage in LifecycleStage)


class ReferenceKindEnum(str, Enum):
    """Emission reference catalogs exposed by the backend."""
    TRANSPORT = "transport"
    PRODUCTION_ENERGY = "production_energy"
    USER_ENERGY = "user_energy"


class EmissionCategory:
    """Record types an emission total can be resolved for."""
    LINE_ITEM = "line_item"
    TRANSPORT = "transport"
    PRODUCTION_ENERGY = "production_energy"
    USER_ENERGY = "user_energy"


class EmissionSource:
    """Where a resolved emission factor came from."""
    OVERRIDE = "override"
    REFERENCE = "reference"
    PRODUCT = "product"


class ResolutionState(str, Enum):
    """Outcome of resolving an emission total."""
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    UNDETERMINED = "undetermined"


class AuditLogAction(int, Enum):
    """Audit log action codes."""
    CREATE = 0
    UPDATE = 1
    DELETE = 2
    ACCESS = 3


AUDIT_LOG_ACTION_LABELS = {
    AuditLogAction.CREATE: "Create",
    AuditLogAction.UPDATE: "Update",
    AuditLogAction.DELETE: "Delete",
    AuditLogAction.ACCESS: "Access",
}

# Labels shown instead of a number while the sharing gate is closed
SHARING_GATE_LABELS = {
    SharingStatus.PENDING: "Pending",
    SharingStatus.REJECTED: "Access denied",
    SharingStatus.NOT_REQUESTED: "Request access",
}

EMISSION_UNIT = "kg CO2e"
MISSING_VALUE_PLACEHOLDER = "—"

DEFAULT_LINE_ITEM_DECIMAL_PLACES = 2
DEFAULT_EMISSION_DECIMAL_PLACES = 3
DEFAULT_MIN_SEARCH_LENGTH = 4

SESSION_COMPANY_HEADER = "X-Company-Id"
LOGIN_REDIRECT = "/login"
