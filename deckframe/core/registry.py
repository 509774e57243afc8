"""Rule registry: stores and orders the framing pipeline stages."""

from __future__ import annotations
import logging

from deckframe.models.context import StructureContext
from deckframe.rules.base import FramingRule

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Central registry for all framing rules.

    Rule ids are unique and every dependency must name a registered rule;
    `check_dependencies` enforces the latter once the pipeline is assembled.
    During a calculation the registry returns the applicable rules sorted by
    priority with dependencies resolved.
    """

    def __init__(self) -> None:
        self._rules: dict[str, FramingRule] = {}

    def register(self, rule: FramingRule) -> None:
        """Register a framing rule. Raises ValueError on a duplicate id."""
        rule_id = rule.get_id()
        if rule_id in self._rules:
            raise ValueError(f"Rule {rule_id!r} is already registered")
        self._rules[rule_id] = rule

    def check_dependencies(self) -> None:
        """Raise ValueError if any rule depends on an id nothing registered."""
        missing = sorted(
            f"{rule_id} -> {dep_id}"
            for rule_id, rule in self._rules.items()
            for dep_id in rule.dependencies
            if dep_id not in self._rules
        )
        if missing:
            raise ValueError(f"Unknown rule dependencies: {', '.join(missing)}")

    def list_rules(self) -> list[FramingRule]:
        """Return all registered rules in execution order."""
        return sorted(self._rules.values(), key=lambda r: r.priority)

    def get_applicable_rules(self, context: StructureContext) -> list[FramingRule]:
        """
        Return rules that apply to the given context, sorted by priority.

        Respects GenerationConfig.enabled_rules and disabled_rules; ids in
        either list that name no registered rule are logged and ignored.
        """
        config = context.config
        unknown = [
            rule_id for rule_id in (*config.enabled_rules, *config.disabled_rules)
            if rule_id not in self._rules
        ]
        if unknown:
            logger.warning("Ignoring unknown rule id(s) in config: %s", ", ".join(unknown))

        candidates = list(self._rules.values())
        if config.enabled_rules:
            candidates = [r for r in candidates if r.get_id() in config.enabled_rules]
        if config.disabled_rules:
            candidates = [r for r in candidates if r.get_id() not in config.disabled_rules]

        applicable = [r for r in candidates if r.applies(context)]
        applicable.sort(key=lambda r: r.priority)
        return self._resolve_order(applicable)

    def _resolve_order(self, rules: list[FramingRule]) -> list[FramingRule]:
        """Topological sort; a dependency switched off for this run is skipped."""
        rule_map = {r.get_id(): r for r in rules}
        visited: set[str] = set()
        ordered: list[FramingRule] = []

        def visit(rule_id: str) -> None:
            if rule_id in visited:
                return
            visited.add(rule_id)
            rule = rule_map.get(rule_id)
            if rule is None:
                return
            for dep_id in rule.dependencies:
                visit(dep_id)
            ordered.append(rule)

        for r in rules:
            visit(r.get_id())

        return ordered


def create_default_registry() -> RuleRegistry:
    """Create a registry with the full deck framing pipeline."""
    from deckframe.rules.sizing import JoistSizingRule
    from deckframe.rules.beams.supports import WallSideSupportRule, JoistSupportRule
    from deckframe.rules.beams.layout import OuterBeamRule, MidBeamRule
    from deckframe.rules.joists import JoistLayoutRule
    from deckframe.rules.diagonals import (
        DiagonalLedgerRule, DiagonalRimRule, BoundaryClipRule, DiagonalTrimRule,
    )
    from deckframe.rules.rim_joists import RimJoistRule, PerimeterRimRule
    from deckframe.rules.blocking import MidSpanBlockingRule, PictureFrameBlockingRule
    from deckframe.rules.merge import BeamMergeRule

    registry = RuleRegistry()
    for rule in (
        JoistSizingRule(),
        WallSideSupportRule(),
        OuterBeamRule(),
        MidBeamRule(),
        JoistSupportRule(),
        JoistLayoutRule(),
        DiagonalLedgerRule(),
        DiagonalRimRule(),
        BoundaryClipRule(),
        RimJoistRule(),
        DiagonalTrimRule(),
        PerimeterRimRule(),
        MidSpanBlockingRule(),
        PictureFrameBlockingRule(),
        BeamMergeRule(),
    ):
        registry.register(rule)
    registry.check_dependencies()
    return registry
