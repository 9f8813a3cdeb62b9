"""Exceptions raised by the crdsplit engine.

Load, save and cycle errors are fatal for a command. ``InvalidCRDError`` and
``DocumentParseError`` are recoverable: the walk that hits them records a
diagnostic and moves on.
"""


class CRDSplitError(Exception):
    """Base class for all crdsplit errors."""


class BundleLoadError(CRDSplitError):
    """A chart could not be read from its path."""


class BundleSaveError(CRDSplitError):
    """A chart could not be written to its destination."""


class CyclicDependencyError(CRDSplitError):
    """A chart appears among its own dependencies."""


class InvalidCRDError(CRDSplitError, ValueError):
    """A file under the CRD directory is not a CustomResourceDefinition."""


class DocumentParseError(CRDSplitError, ValueError):
    """A structured document could not be parsed or updated."""
