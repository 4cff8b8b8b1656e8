"""Exceptions raised by the menu generator core."""


class MenuError(Exception):
    """Base class for menu generator errors."""


class RecipeLookupError(MenuError):
    """The recipe lookup service could not be reached or answered with an error."""


class GenerationFailed(MenuError):
    """A generation pass was aborted; the previous plan is left untouched."""

    def __init__(self, message: str = "Impossible de générer des menus pour le moment."):
        super().__init__(message)
        self.message = message


class InvalidSlot(MenuError, ValueError):
    """A slot or day reference does not exist in the current plan."""
