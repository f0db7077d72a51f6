"""
Companies API router.

Browsing of the caller's own companies and of supplier companies.
"""
import logging

from fastapi import APIRouter, Depends

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.config import Config
from pcf_portal.core.dependencies import (
    get_backend_client,
    get_config_dependency,
    get_session_context,
)
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.company import CompanyPydModel
from pcf_portal.pydantic_models.product import ProductPydModel
from pcf_portal.repositories import CompanyRepository, ProductRepository
from pcf_portal.utils.constants import DEFAULT_MIN_SEARCH_LENGTH

router = APIRouter(
    prefix="/api/v1/companies",
    tags=["Companies"],
)

logger = logging.getLogger(__name__)


def min_search_length(config: Config) -> int:
    return int(config.section("search").get("min_search_length", DEFAULT_MIN_SEARCH_LENGTH))


@router.get("/my", response_model=list[CompanyPydModel])
async def list_my_companies(
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_session_context),
):
    """List the companies the caller is a member of."""
    return await CompanyRepository(client, session).list_my()


@router.get("/", response_model=list[CompanyPydModel])
async def search_companies(
    search: str | None = None,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_session_context),
    config: Config = Depends(get_config_dependency),
):
    """
    List all companies, filtered by name.

    Args:
        search: Name filter; shorter than the minimum search length lists all
    """
    repo = CompanyRepository(client, session, min_search_length(config))
    return await repo.search(search)


@router.get("/{company_id}", response_model=CompanyPydModel)
async def get_company(
    company_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_session_context),
):
    return await CompanyRepository(client, session).get(company_id)


@router.get("/{company_id}/products", response_model=list[ProductPydModel])
async def list_company_products(
    company_id: int,
    search: str | None = None,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_session_context),
    config: Config = Depends(get_config_dependency),
):
    """List a company's products, e.g. a supplier's, to add to a BOM."""
    repo = ProductRepository(client, session, min_search_length(config))
    return await repo.list_for_company(company_id, search)
