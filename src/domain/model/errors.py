"""Domain-level exceptions.

Services raise these errors to express configuration problems and
source failures. Only UnsupportedError and ConfigurationError are meant
to reach the caller; the others are caught at the tier that raised them.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class UnsupportedError(DomainError):
    """A language or difficulty is not served by any configured source."""

    def __init__(self, language: str, difficulty: str | None = None):
        self.language = language
        self.difficulty = difficulty
        if difficulty:
            message = f"{language} does not support {difficulty}"
        else:
            message = f"Language not supported: {language}"
        super().__init__(message)


class ConfigurationError(DomainError):
    """A component was built with an invalid configuration."""


class FetchError(DomainError):
    """A fetch source failed with a network, HTTP, or parse error."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


class PersistenceError(DomainError):
    """Writing to the persistent store failed."""
