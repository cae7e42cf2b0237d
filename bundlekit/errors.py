"""
Standardized Error Handling for bundlekit

Provides hierarchical exception classes with error codes and context.
Only dependency validation and configuration problems are raised as
bundlekit errors; I/O, plugin and HTTP failures propagate unchanged.
"""

from typing import Any


class BundleKitError(Exception):
    """Base exception for all bundlekit errors.

    Includes error code for programmatic handling and context for debugging.

    Example:
        raise BundleKitError(
            code="DEPENDENCY_NOT_FOUND",
            message="file 'a.js' import not found: './b.js'",
            input="a.js",
        )
    """

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")

    def __repr__(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r}, {ctx_str})"


# ==============================================================================
# Graph Errors
# ==============================================================================


class DependencyNotFoundError(BundleKitError):
    """A statically declared dependency does not exist on disk.

    Fatal: aborts the whole build invocation.
    """

    kind = "dependency"
    error_code = "DEPENDENCY_NOT_FOUND"

    def __init__(self, input: str, dependency: str, **context: Any) -> None:
        self.input = input
        self.dependency = dependency
        super().__init__(
            code=self.error_code,
            message=f"file '{input}' {self.kind} not found: '{dependency}'",
            input=input,
            dependency=dependency,
            **context,
        )


class ImportNotFoundError(DependencyNotFoundError):
    """Import target missing."""

    kind = "import"
    error_code = "IMPORT_NOT_FOUND"


class ExportNotFoundError(DependencyNotFoundError):
    """Re-export target missing."""

    kind = "export"
    error_code = "EXPORT_NOT_FOUND"


# ==============================================================================
# Configuration Errors
# ==============================================================================


class ConfigurationError(BundleKitError):
    """Error in configuration or persisted build state."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(code="CONFIGURATION_ERROR", message=message, **context)


__all__ = [
    "BundleKitError",
    "DependencyNotFoundError",
    "ImportNotFoundError",
    "ExportNotFoundError",
    "ConfigurationError",
]
