# app/errors.py


class TypemasterError(Exception):
    """Base class for errors raised by the assessment code."""


class ScoringInputError(TypemasterError, ValueError):
    """A caller passed parameters the alignment or scoring code does not accept."""


class ConfigError(TypemasterError):
    pass


class DatabaseError(TypemasterError):
    pass


class RegistrationRequired(TypemasterError):
    """Input arrived before the student entered an admission number and name."""
