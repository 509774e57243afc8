"""Abstract base class for all framing rules.

Every pipeline stage implements this interface. Rules are:
- Self-contained: each produces or adjusts one kind of framing member
- Composable: the registry runs them in sequence on a shared context
- Conditional: each rule decides if it applies to the current footprint
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from deckframe.models.context import StructureContext


class FramingRule(ABC):
    """
    Base class for all framing rules.

    Subclasses implement `applies()` and `apply()`.
    The generator queries the registry, filters by `applies()`,
    sorts by `priority`, and calls `apply()` in order.
    """

    # Lower priority = runs first. Default 100.
    priority: int = 100

    # IDs of rules that must run before this one.
    dependencies: list[str] = []

    @abstractmethod
    def get_id(self) -> str:
        """Unique identifier for this rule (e.g., 'joists.layout')."""
        ...

    @abstractmethod
    def get_name(self) -> str:
        """Human-readable name (e.g., 'Joist Layout')."""
        ...

    def applies(self, context: StructureContext) -> bool:
        """Return True if this rule should run. Only footprint analysis is available here."""
        return True

    @abstractmethod
    def apply(self, context: StructureContext) -> None:
        """
        Add or adjust members on the context.

        Raise StructureError for a condition that makes the plan unusable.
        """
        ...
