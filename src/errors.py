"""
Exception hierarchy for the kitchen design engine.

Every failure raised by the catalogs, builder, optimizer and invariant
checker derives from DesignEngineError, so API layers can map the whole
family onto a single validation response.
"""


class DesignEngineError(ValueError):
    """Base class for design-engine failures."""


class UnknownIdentifier(DesignEngineError, LookupError):
    """An id was looked up in a catalog that does not contain it."""

    def __init__(self, identifier: str, catalog: str):
        self.identifier = identifier
        self.catalog = catalog
        super().__init__(f"Unknown {catalog} id: {identifier!r}")


class UnknownModule(UnknownIdentifier):
    def __init__(self, identifier: str, catalog: str = "module"):
        super().__init__(identifier, catalog)


class UnknownFinish(UnknownIdentifier):
    def __init__(self, identifier: str, catalog: str = "finish"):
        super().__init__(identifier, catalog)


class UnknownLayout(UnknownIdentifier):
    def __init__(self, identifier: str, catalog: str = "layout"):
        super().__init__(identifier, catalog)


class LayoutTemplateError(DesignEngineError):
    """A layout template is structurally inconsistent."""


class PlacementRuleError(DesignEngineError):
    """Externally generated placements break the layout's placement rules."""


class DesignInvariantError(DesignEngineError):
    """A Design no longer satisfies its consistency invariants."""


class DuplicatePlacementId(DesignInvariantError):
    def __init__(self, placement_id: str):
        self.placement_id = placement_id
        super().__init__(f"Duplicate placement id detected: {placement_id}")


class PriceMismatch(DesignInvariantError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Design price invariant violated. expected={expected}, actual={actual}"
        )
