class FabricError(ValueError):
    """Base class for configuration problems reported before generation."""


class InvalidConfigError(FabricError):
    """Contradictory or malformed counts, ratios or options."""


class CapacityError(FabricError):
    """The facility does not have enough rack slots for the requested switches."""

    def __init__(self, required: int, racks: int, per_rack: int, noun: str = "leaves"):
        self.required = required
        self.racks = racks
        self.per_rack = per_rack
        self.capacity = racks * per_rack
        super().__init__(
            f"Not enough racks for {required} {noun}: "
            f"{racks} racks × {per_rack} devices/rack = {self.capacity} capacity"
        )
