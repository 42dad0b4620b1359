class OptionsError(TypeError):
    """An option was missing or of the wrong type."""


class PreconditionError(RuntimeError):
    """Something the run needs (env file, browser binary, server root) is missing."""


class NakError(Exception):
    """A watched console message matched the negative-acknowledge pattern."""

    def __init__(self, text):
        super().__init__(text)
        self.text = text
