"""
Transform Camera - Exceptions
"""

from typing import Any


class TransformCameraError(Exception):
    """Base exception for transform camera errors."""
    pass


class ConfigValidationError(TransformCameraError):
    """A required configuration field is missing."""

    def __init__(self, path: str, field: str):
        self.path = path
        self.field = field
        super().__init__(f'Error validating. Path: "{path}" Error: "{field}" is required')


class DependencyError(TransformCameraError):
    """The upstream source named in the config could not be resolved."""

    def __init__(self, source: str, cause: str):
        self.source = source
        self.cause = cause
        super().__init__(f"no source camera for transform pipeline ({source}): {cause}")


class TransformError(TransformCameraError):
    """A single pipeline step could not be applied."""
    pass


class UnsupportedTransformError(TransformError):
    """The transform type is not a known operation."""

    def __init__(self, transform_type: str):
        self.transform_type = transform_type
        super().__init__(f"unsupported transform type: {transform_type}")


class InvalidParameterError(TransformError):
    """A required parameter is missing or not of the expected kind."""

    _MISSING = object()

    def __init__(self, name: str, value: Any = _MISSING):
        self.name = name
        self.value = None if value is self._MISSING else value
        if value is self._MISSING:
            super().__init__(f"invalid {name} parameter: missing")
        else:
            super().__init__(f"invalid {name} parameter: {value!r}")


class PipelineError(TransformCameraError):
    """A pipeline step failed; wraps the step's TransformError."""

    def __init__(self, index: int, transform_type: str, cause: TransformError):
        self.index = index
        self.transform_type = transform_type
        self.cause = cause
        super().__init__(f"failed to apply transform {transform_type}: {cause}")
