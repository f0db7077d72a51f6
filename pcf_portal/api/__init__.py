"""
API routers module.
"""
from pcf_portal.api.audit import router as audit_router
from pcf_portal.api.bom import router as bom_router
from pcf_portal.api.companies import router as companies_router
from pcf_portal.api.production_energy_emissions import router as production_energy_router
from pcf_portal.api.products import router as products_router
from pcf_portal.api.references import router as references_router
from pcf_portal.api.service import router as service_router
from pcf_portal.api.sharing_requests import router as sharing_requests_router
from pcf_portal.api.transport_emissions import router as transport_router
from pcf_portal.api.user_energy_emissions import router as user_energy_router

__all__ = [
    "audit_router",
    "bom_router",
    "companies_router",
    "production_energy_router",
    "products_router",
    "references_router",
    "service_router",
    "sharing_requests_router",
    "transport_router",
    "user_energy_router",
]
