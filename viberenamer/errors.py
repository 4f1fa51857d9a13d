"""Exceptions raised by the renaming pipeline."""


class NoInputFilesError(ValueError):
    """No file arguments were given."""


class NoInstructionProvidedError(ValueError):
    """No renaming request was supplied or entered."""


class ServiceError(RuntimeError):
    """The generation service failed to produce a reply."""
