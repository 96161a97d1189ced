"""Exception hierarchy for interop build preparation.

Recoverable errors derive from :class:`InteropError`; the build driver
decides whether a failure aborts the whole build or is reported per
module. :class:`PreconditionViolation` is deliberately outside that
hierarchy: it signals a bug in the caller.
"""

from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

if TYPE_CHECKING:
    from interopkit.diagnostics import Diagnostic


class InteropError(Exception):
    """Base class for recoverable build-preparation errors."""

    pass


class UnsupportedLayoutError(InteropError):
    """Include directory shape is ambiguous for umbrella selection.

    Raised when an umbrella header coexists with sibling directories or
    header files it cannot account for. Only fixable by changing the
    package layout.

    Advisories gathered before the layout was rejected travel on
    `diagnostics` so callers can still report them.
    """

    def __init__(
        self,
        module_name: str,
        diagnostics: Optional[Sequence["Diagnostic"]] = None,
    ) -> None:
        self.module_name = module_name
        self.diagnostics: List["Diagnostic"] = list(diagnostics or ())
        super().__init__(f"unsupported include layout for module '{module_name}'")


class IOFailure(InteropError):
    """Filesystem operation failed while generating an artifact."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None) -> None:
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"I/O failure at {self.path}{detail}")


class ConfigurationError(InteropError):
    """Configuration or manifest input could not be parsed or validated."""

    pass


class ManifestError(ConfigurationError):
    """Package manifest is malformed or inconsistent."""

    pass


class PreconditionViolation(AssertionError):
    """Caller broke a documented precondition (programming error)."""

    pass


__all__ = [
    "ConfigurationError",
    "InteropError",
    "IOFailure",
    "ManifestError",
    "PreconditionViolation",
    "UnsupportedLayoutError",
]
