"""
Upstream repositories.

Each repository wraps one backend resource and is bound to the caller's session.
"""
from pcf_portal.repositories.audit_log import AuditLogRepository
from pcf_portal.repositories.base import BaseRepository
from pcf_portal.repositories.bom import BomRepository
from pcf_portal.repositories.company import CompanyRepository
from pcf_portal.repositories.emission_record import (
    EmissionRecordRepository,
    ProductionEnergyEmissionRepository,
    TransportEmissionRepository,
    UserEnergyEmissionRepository,
)
from pcf_portal.repositories.emission_reference import EmissionReferenceRepository
from pcf_portal.repositories.product import ProductRepository
from pcf_portal.repositories.sharing_request import SharingRequestRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "BomRepository",
    "CompanyRepository",
    "EmissionRecordRepository",
    "EmissionReferenceRepository",
    "ProductRepository",
    "ProductionEnergyEmissionRepository",
    "SharingRequestRepository",
    "TransportEmissionRepository",
    "UserEnergyEmissionRepository",
]
