"""Error kinds raised by the puzzle core."""


class OutOfRangeError(IndexError):
    """A level index or level id lookup fell outside the catalog."""


class NotLoadedError(RuntimeError):
    """An engine or session operation ran before any level was loaded."""


class PersistenceUnavailableError(OSError):
    """The key-value store could not be read or written."""
