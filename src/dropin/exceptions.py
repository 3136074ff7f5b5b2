"""
Custom exceptions for the drop-in schedule pipeline.

This module defines a hierarchy of exceptions to provide more
precise error handling across the build and query phases.
"""


class PipelineBaseError(Exception):
    """
    Base exception for all pipeline-related errors.

    All custom exceptions in the package should inherit from this class.
    Provides a common base for catching and handling pipeline-specific errors.
    """

    pass


class ConfigurationError(PipelineBaseError):
    """
    Raised when there are configuration-related issues.

    This exception is used when:
    - Required configuration parameters are missing
    - Configuration values are invalid
    """

    pass


class BuildError(PipelineBaseError):
    """
    Raised during the database build process.

    Any BuildError aborts the whole build; no partial artifact is left behind.
    """

    pass


class SourceFetchError(BuildError):
    """
    Raised when either source CSV feed cannot be downloaded.

    Covers:
    - Connection problems and timeouts
    - Non-success HTTP status codes
    """

    pass


class ArtifactWriteError(BuildError):
    """
    Raised for filesystem failures while exporting the database artifact.

    Covers:
    - Output directory creation failures
    - Database file write or replace failures
    """

    pass


class ArtifactLoadError(PipelineBaseError):
    """
    Raised when the database artifact cannot be opened for querying.

    The artifact is either fully valid at open time or unusable; there is
    no partially loaded state.
    """

    pass


class QueryError(PipelineBaseError):
    """
    Raised for malformed schedule queries.

    Never escapes the query engine: the engine logs it and returns
    an empty result set instead.
    """

    pass
