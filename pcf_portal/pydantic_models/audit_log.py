"""
Pydantic models for audit log entries.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from pcf_portal.utils.constants import AUDIT_LOG_ACTION_LABELS, AuditLogAction


class AuditLogItemPydModel(BaseModel):
    """One audit log entry for a company or product."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    timestamp: datetime
    actor_username: Optional[str] = None
    content_type_app_label: Optional[str] = None
    content_type_model: Optional[str] = None
    object_pk: Optional[str] = None
    action: AuditLogAction
    changes: Optional[str] = None

    @computed_field
    @property
    def action_label(self) -> str:
        return AUDIT_LOG_ACTION_LABELS[self.action]


class AuditLogPage(BaseModel):
    """Page of audit log entries."""

    items: list[AuditLogItemPydModel] = Field(default_factory=list)
    page: int = 1
    page_size: int = 20
    total: int = 0
