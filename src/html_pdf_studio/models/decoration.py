"""Page decoration and margin models."""

from dataclasses import dataclass

from .enums import Alignment, MarginUnit


# Upper bound of a single margin value, per unit
MARGIN_LIMITS = {
    MarginUnit.MM: 50.0,
    MarginUnit.CM: 5.0,
    MarginUnit.IN: 5.0,
}

# Millimetres per unit
MM_PER_UNIT = {
    MarginUnit.MM: 1.0,
    MarginUnit.CM: 10.0,
    MarginUnit.IN: 25.4,
}


@dataclass(frozen=True)
class DecorationConfig:
    """
    Configuration of a page header or footer.

    A decoration with empty text and both auto-fields disabled is absent
    and is never sent to the paginator.
    """
    text: str = ""
    is_rich_content: bool = False
    show_page_number: bool = False
    show_date: bool = False
    alignment: Alignment = Alignment.CENTER

    @property
    def is_present(self) -> bool:
        """Check whether this decoration should be rendered."""
        return bool(self.text) or self.show_page_number or self.show_date


DEFAULT_HEADER = DecorationConfig()
DEFAULT_FOOTER = DecorationConfig(show_page_number=True)


@dataclass(frozen=True)
class MarginSpec:
    """Page margins expressed in a single physical unit."""
    top: float = 20.0
    right: float = 20.0
    bottom: float = 20.0
    left: float = 20.0
    unit: MarginUnit = MarginUnit.MM

    def values(self) -> tuple[float, float, float, float]:
        """Return (top, right, bottom, left)."""
        return (self.top, self.right, self.bottom, self.left)
