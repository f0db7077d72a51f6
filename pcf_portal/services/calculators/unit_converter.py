"""
Number handling utilities for emissions calculations.

Converts backend numbers and free-text form inputs to Decimal and rounds
emission figures for display.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation


class UnitConverter:
    """
    Number conversion service.

    Stateless helpers shared by the resolver and the form validators.
    """

    NAN = Decimal("NaN")
    ZERO = Decimal("0")

    @staticmethod
    def parse_form_number(raw: str | None) -> Decimal | None:
        """
        Parse a free-text numeric form input.

        Blank input means "not entered" and gives None, never zero.
        Anything that is not a number gives NaN so validation can reject it.

        Example:
            >>> UnitConverter.parse_form_number("  ")
            >>> UnitConverter.parse_form_number("abc")
            Decimal('NaN')
        """
        if raw is None or raw.strip() == "":
            return None
        try:
            return Decimal(raw.strip())
        except InvalidOperation:
            return UnitConverter.NAN

    @staticmethod
    def parse_positive(raw: str | None) -> Decimal | None:
        """
        Parse a form input that must be a number greater than zero.

        Returns:
            Parsed Decimal, or None when blank, non-numeric, non-finite or <= 0
        """
        value = UnitConverter.parse_form_number(raw)
        if not UnitConverter.is_finite(value) or value <= 0:
            return None
        return value

    @staticmethod
    def is_finite(value: Decimal | None) -> bool:
        """True for a finite Decimal; False for None, NaN and infinities."""
        return value is not None and value.is_finite()

    @staticmethod
    def finite_or_zero(value: Decimal | None) -> Decimal:
        """Coefficient as used in sums: missing or non-finite counts as zero."""
        return value if UnitConverter.is_finite(value) else UnitConverter.ZERO

    @staticmethod
    def round_emission(value: Decimal, places: int) -> Decimal | None:
        """
        Round an emission figure half-up to a fixed number of decimals.

        Figures with more digits than the decimal context can hold give None.

        Example:
            >>> UnitConverter.round_emission(Decimal("12.5"), 2)
            Decimal('12.50')
        """
        exponent = Decimal(1).scaleb(-places)
        try:
            return value.quantize(exponent, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            return None
