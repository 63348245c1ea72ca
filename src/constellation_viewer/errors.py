"""Exceptions raised by the constellation viewer."""


class ConstellationViewerError(Exception):
    """Base class for viewer errors."""


class NoResolvableStarsError(ConstellationViewerError, LookupError):
    """A figure references no catalog star with finite coordinates."""

    def __init__(self, figure_name: str | None = None):
        self.figure_name = figure_name
        if figure_name:
            message = f"Figure '{figure_name}' has no resolvable stars"
        else:
            message = "Figure has no resolvable stars"
        super().__init__(message)


class UnknownFigureError(ConstellationViewerError, KeyError):
    """Requested figure name is not in the figure map."""

    def __init__(self, figure_name: str):
        self.figure_name = figure_name
        super().__init__(figure_name)

    def __str__(self) -> str:
        return f"Unknown figure: {self.figure_name}"
