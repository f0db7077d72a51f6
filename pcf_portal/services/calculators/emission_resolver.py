"""
Emission total resolution.

Turns already-fetched records (BOM line items, transport legs, production
and user energy entries) into display-ready emission totals in kg CO2e. Override
factors, when present, fully replace the reference catalog; supplier figures
stay hidden until the sharing request has been accepted.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Union

from pcf_portal.core.config import Config
from pcf_portal.pydantic_models.bom import LineItemPydModel, LineItemView
from pcf_portal.pydantic_models.calculation import (
    EmissionCategorySummary,
    ProductEmissionSummary,
    ResolvedEmission,
)
from pcf_portal.pydantic_models.emission_reference import (
    EmissionFactorBase,
    EmissionReferencePydModel,
)
from pcf_portal.pydantic_models.production_energy import (
    ProductionEnergyEmissionPydModel,
    ProductionEnergyEmissionView,
)
from pcf_portal.pydantic_models.transport_emission import (
    TransportEmissionPydModel,
    TransportEmissionView,
)
from pcf_portal.pydantic_models.user_energy import (
    UserEnergyEmissionPydModel,
    UserEnergyEmissionView,
)
from pcf_portal.services.calculators.unit_converter import UnitConverter
from pcf_portal.services.sharing.sharing_gate import SharingGate
from pcf_portal.utils.constants import (
    DEFAULT_EMISSION_DECIMAL_PLACES,
    DEFAULT_LINE_ITEM_DECIMAL_PLACES,
    EMISSION_UNIT,
    MISSING_VALUE_PLACEHOLDER,
    EmissionCategory,
    EmissionSource,
    ResolutionState,
)

logger = logging.getLogger(__name__)

EmissionRecord = Union[
    TransportEmissionPydModel,
    ProductionEnergyEmissionPydModel,
    UserEnergyEmissionPydModel,
]


class EmissionResolutionError(Exception):
    """Raised when a record of an unknown type is handed to the resolver."""

    def __init__(self, record):
        self.record = record
        super().__init__(
            f"Cannot resolve emissions for record of type {type(record).__name__}"
        )


class EmissionTotalResolver:
    """
    Pure resolver for emission totals.

    Formulas:
        transport:          distance * weight * factor_sum
        production energy:  energy_consumption * factor_sum
        BOM line item:      quantity * per_unit_emission

    where factor_sum is the sum of biogenic + non-biogenic coefficients over
    every override factor when the record has any, otherwise over every
    factor of its reference. Lifecycle stages are not matched.
    """

    def __init__(
        self,
        line_item_places: int = DEFAULT_LINE_ITEM_DECIMAL_PLACES,
        emission_places: int = DEFAULT_EMISSION_DECIMAL_PLACES,
    ):
        self.line_item_places = line_item_places
        self.emission_places = emission_places

    @classmethod
    def from_config(cls, config: Config) -> "EmissionTotalResolver":
        section = config.section("emission_calculation")
        return cls(
            line_item_places=int(
                section.get("line_item_decimal_places", DEFAULT_LINE_ITEM_DECIMAL_PLACES)
            ),
            emission_places=int(
                section.get("emission_decimal_places", DEFAULT_EMISSION_DECIMAL_PLACES)
            ),
        )

    # ------------------------------------------------------------------
    # Factor sums
    # ------------------------------------------------------------------

    @staticmethod
    def sum_bio_and_non_bio(factors: Iterable[EmissionFactorBase]) -> Decimal:
        """
        Sum biogenic and non-biogenic coefficients across all factors.

        Missing or non-finite coefficients count as zero.

        Example:
            >>> EmissionTotalResolver.sum_bio_and_non_bio([
            ...     EmissionFactorPydModel(
            ...         co_2_emission_factor_biogenic=Decimal("1.5"),
            ...         co_2_emission_factor_non_biogenic=Decimal("0.5"),
            ...     )
            ... ])
            Decimal('2.0')
        """
        total = Decimal("0")
        for factor in factors:
            total += UnitConverter.finite_or_zero(factor.co_2_emission_factor_biogenic)
            total += UnitConverter.finite_or_zero(
                factor.co_2_emission_factor_non_biogenic
            )
        return total

    def factor_sum(self, record: EmissionRecord) -> tuple[Optional[Decimal], Optional[str]]:
        """
        Emission factor per unit for a transport or energy record.

        Returns:
            (factor_sum, source), or (None, None) when the record has neither
            overrides nor reference details
        """
        if record.override_factors:
            return self.sum_bio_and_non_bio(record.override_factors), EmissionSource.OVERRIDE
        if record.reference_details is not None:
            return (
                self.sum_bio_and_non_bio(record.reference_details.emission_factors),
                EmissionSource.REFERENCE,
            )
        return None, None

    # ------------------------------------------------------------------
    # Result builders
    # ------------------------------------------------------------------

    @staticmethod
    def _available(value: Decimal, source: str, **extra) -> ResolvedEmission:
        return ResolvedEmission(
            state=ResolutionState.AVAILABLE,
            value=value,
            display=f"{value} {EMISSION_UNIT}",
            source=source,
            **extra,
        )

    @staticmethod
    def _undetermined(source: Optional[str] = None, **extra) -> ResolvedEmission:
        return ResolvedEmission(
            state=ResolutionState.UNDETERMINED,
            display=MISSING_VALUE_PLACEHOLDER,
            source=source,
            **extra,
        )

    @staticmethod
    def _positive_or_none(*quantities: Optional[Decimal]) -> Optional[Decimal]:
        """Product of base quantities, or None if any is missing, non-finite or <= 0."""
        product = Decimal("1")
        for quantity in quantities:
            if not UnitConverter.is_finite(quantity) or quantity <= 0:
                return None
            product *= quantity
        return product

    def _scale(
        self, base: Optional[Decimal], record: EmissionRecord, label: str
    ) -> ResolvedEmission:
        factor, source = self.factor_sum(record)
        if base is None or factor is None:
            logger.debug(f"Emission total undetermined for {label} {record.id}")
            return self._undetermined(source)

        total = base * factor
        if not total.is_finite():
            return self._undetermined(source)
        rounded = UnitConverter.round_emission(total, self.emission_places)
        if rounded is None:
            logger.warning(f"Emission total of {label} {record.id} is too large to round")
            return self._undetermined(source)
        return self._available(rounded, source)

    # ------------------------------------------------------------------
    # Resolution per record type
    # ------------------------------------------------------------------

    def resolve_transport(self, emission: TransportEmissionPydModel) -> ResolvedEmission:
        """Total emissions of a transport leg: distance * weight * factor_sum."""
        base = self._positive_or_none(emission.distance, emission.weight)
        return self._scale(base, emission, EmissionCategory.TRANSPORT)

    def resolve_production_energy(
        self, emission: ProductionEnergyEmissionPydModel
    ) -> ResolvedEmission:
        """Total emissions of a production energy entry: energy * factor_sum."""
        base = self._positive_or_none(emission.energy_consumption)
        return self._scale(base, emission, EmissionCategory.PRODUCTION_ENERGY)

    def resolve_user_energy(self, emission: UserEnergyEmissionPydModel) -> ResolvedEmission:
        base = self._positive_or_none(emission.energy_consumption)
        return self._scale(base, emission, EmissionCategory.USER_ENERGY)

    def resolve_line_item(self, line_item: LineItemPydModel) -> ResolvedEmission:
        """
        Emission of a BOM line, checked against the sharing gate first.

        The per-unit figure is the supplier product's override sum when it
        carries overrides, otherwise its emission_total.
        """
        status = line_item.product_sharing_request_status
        if not SharingGate.can_view(status):
            return ResolvedEmission(
                state=ResolutionState.UNAVAILABLE,
                display=SharingGate.gate_label(status),
                sharing_status=status,
            )

        product = line_item.line_item_product
        if product.override_factors:
            per_unit = self.sum_bio_and_non_bio(product.override_factors)
            source = EmissionSource.OVERRIDE
        else:
            per_unit = product.emission_total
            source = EmissionSource.PRODUCT

        quantity = line_item.quantity
        if not UnitConverter.is_finite(per_unit) or not UnitConverter.is_finite(quantity):
            return self._undetermined(source, sharing_status=status)

        total = UnitConverter.round_emission(per_unit * quantity, self.line_item_places)
        if total is None:
            logger.warning(f"Emission total of line item {line_item.id} is too large to round")
            return self._undetermined(source, sharing_status=status)
        return self._available(total, source, sharing_status=status)

    def resolve(self, record) -> ResolvedEmission:
        """Dispatch on record type."""
        if isinstance(record, LineItemPydModel):
            return self.resolve_line_item(record)
        if isinstance(record, TransportEmissionPydModel):
            return self.resolve_transport(record)
        if isinstance(record, ProductionEnergyEmissionPydModel):
            return self.resolve_production_energy(record)
        if isinstance(record, UserEnergyEmissionPydModel):
            return self.resolve_user_energy(record)
        raise EmissionResolutionError(record)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def line_item_view(self, line_item: LineItemPydModel) -> LineItemView:
        product = line_item.line_item_product
        return LineItemView(
            id=line_item.id,
            product_id=product.id,
            product_name=product.name,
            manufacturer_name=product.manufacturer_name or "Unknown",
            supplier_name=product.supplier_name or "Unknown",
            supplier_id=product.supplier,
            quantity=line_item.quantity,
            reference_impact_unit=product.reference_impact_unit,
            product_sharing_request_status=line_item.product_sharing_request_status,
            emission=self.resolve_line_item(line_item),
        )

    def transport_view(self, emission: TransportEmissionPydModel) -> TransportEmissionView:
        return TransportEmissionView(
            **emission.model_dump(),
            total_emissions=self.resolve_transport(emission),
        )

    def production_energy_view(
        self, emission: ProductionEnergyEmissionPydModel
    ) -> ProductionEnergyEmissionView:
        return ProductionEnergyEmissionView(
            **emission.model_dump(),
            total_emissions=self.resolve_production_energy(emission),
        )

    def user_energy_view(self, emission: UserEnergyEmissionPydModel) -> UserEnergyEmissionView:
        return UserEnergyEmissionView(
            **emission.model_dump(),
            total_emissions=self.resolve_user_energy(emission),
        )

    @staticmethod
    def attach_references(
        records: list[EmissionRecord], references: list[EmissionReferencePydModel]
    ) -> list[EmissionRecord]:
        """
        Fill in reference_details for records that only carry a reference id.

        Records whose reference is unknown are returned unchanged.
        """
        by_id = {reference.id: reference for reference in references}
        enriched = []
        for record in records:
            if record.reference_details is None and record.reference in by_id:
                record = record.model_copy(
                    update={"reference_details": by_id[record.reference]}
                )
            enriched.append(record)
        return enriched

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    @staticmethod
    def _summarize_category(
        category: str, resolved: list[ResolvedEmission]
    ) -> EmissionCategorySummary:
        available = [r.value for r in resolved if r.is_available]
        return EmissionCategorySummary(
            category=category,
            total=sum(available, Decimal("0")),
            record_count=len(resolved),
            withheld_count=len(resolved) - len(available),
        )

    def summarize_product(
        self,
        line_items: list[LineItemPydModel],
        transport_emissions: list[TransportEmissionPydModel],
        production_energy_emissions: list[ProductionEnergyEmissionPydModel],
        user_energy_emissions: Optional[list[UserEnergyEmissionPydModel]] = None,
    ) -> ProductEmissionSummary:
        """
        Aggregate a product's resolved emissions by category.

        Only available figures are added up; gated and undetermined records
        are counted as withheld and make the summary incomplete.
        """
        categories = [
            self._summarize_category(
                EmissionCategory.LINE_ITEM,
                [self.resolve_line_item(item) for item in line_items],
            ),
            self._summarize_category(
                EmissionCategory.TRANSPORT,
                [self.resolve_transport(e) for e in transport_emissions],
            ),
            self._summarize_category(
                EmissionCategory.PRODUCTION_ENERGY,
                [self.resolve_production_energy(e) for e in production_energy_emissions],
            ),
            self._summarize_category(
                EmissionCategory.USER_ENERGY,
                [self.resolve_user_energy(e) for e in user_energy_emissions or []],
            ),
        ]
        total = sum((c.total for c in categories), Decimal("0"))
        logger.info(
            f"Summarized product emissions: {total} {EMISSION_UNIT} over "
            f"{sum(c.record_count for c in categories)} records"
        )
        return ProductEmissionSummary(
            total=total,
            categories=categories,
            is_complete=all(c.withheld_count == 0 for c in categories),
        )
