"""Errors raised while resolving parameters, directives and Go packages.

Every error is fatal for the run. They are raised where they are detected and
reach the entry point untouched, which reports them and emits no output.
"""


class EncodeGenError(Exception):
    """Base class for all generation failures."""


class ParameterError(EncodeGenError):
    """A run parameter is unknown, missing or malformed."""

    def __init__(self, message, name=None):
        super().__init__(message)
        self.name = name


class ResolutionError(EncodeGenError):
    """One side of a mapping directive could not be resolved."""

    def __init__(self, message, kind, name):
        super().__init__(message)
        self.kind = kind
        self.name = name


class GoPackageError(EncodeGenError):
    """A referenced proto file has no Go import path."""
