"""Exceptions raised by world generation."""


class WorldGenerationError(Exception):
    """Base class for all generation failures."""


class ConfigurationError(WorldGenerationError, ValueError):
    """Generation parameters are invalid; raised before any grid is built."""


class NoLandAvailableError(WorldGenerationError):
    """Territory seeds could not be placed because there is not enough land."""

    def __init__(self, requested: int, land_cells: int, message: str = ""):
        self.requested = requested
        self.land_cells = land_cells
        super().__init__(
            message
            or f"Cannot place {requested} territory seeds on {land_cells} land cells"
        )
