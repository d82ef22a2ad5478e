"""Transform camera - applies an image transform pipeline to an upstream source."""

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator

from transform_camera.exceptions import ConfigValidationError, DependencyError
from transform_camera.processing.codec import MIME_JPEG, decode_image, encode_image
from transform_camera.processing.transforms import Transform, apply_pipeline
from transform_camera.sources.base import (
    CameraProperties,
    FrameSource,
    ImageMetadata,
    NamedImage,
)

logger = logging.getLogger(__name__)


class TransformCameraConfig(BaseModel):
    """Configuration for a transform camera."""

    # Name of the upstream frame source
    source: str = ""

    # Ordered transforms applied to every frame
    pipeline: list[Transform] = Field(default_factory=list)

    @field_validator("pipeline", mode="before")
    @classmethod
    def _empty_pipeline(cls, value: Any) -> Any:
        return [] if value is None else value

    def validate_config(self, path: str) -> list[str]:
        """Check required fields and return implicit dependencies.

        Args:
            path: Location of this component in the enclosing config,
                used in error messages (e.g. "components.0")

        Returns:
            Names of the components this camera depends on

        Raises:
            ConfigValidationError: If no source is configured
        """
        if not self.source:
            raise ConfigValidationError(path, "source")
        return [self.source]


@dataclass(frozen=True)
class _CameraState:
    config: TransformCameraConfig
    source: FrameSource


class TransformCamera:
    """Camera that wraps a source and transforms each frame it returns.

    Reconfiguration replaces the config and source together in a single
    assignment, so a frame in flight always sees one consistent pipeline.
    """

    def __init__(
        self,
        name: str,
        config: TransformCameraConfig,
        dependencies: Mapping[str, FrameSource],
    ):
        self.name = name
        self._state: _CameraState | None = None
        self.reconfigure(config, dependencies)

    def reconfigure(
        self,
        config: TransformCameraConfig,
        dependencies: Mapping[str, FrameSource],
    ) -> None:
        """Apply a new configuration.

        Raises:
            ConfigValidationError: If the config has no source
            DependencyError: If the source is not among the dependencies
        """
        config.validate_config(self.name)

        source = dependencies.get(config.source)
        if source is None:
            raise DependencyError(config.source, "not found in dependencies")

        self._state = _CameraState(config=config, source=source)
        logger.info(
            f"Configured {self.name}: source={config.source}, "
            f"pipeline=[{', '.join(t.type for t in config.pipeline)}]"
        )

    def _snapshot(self) -> _CameraState:
        state = self._state
        if state is None:
            raise RuntimeError(f"Camera {self.name!r} is closed")
        return state

    @property
    def config(self) -> TransformCameraConfig:
        return self._snapshot().config

    @property
    def source(self) -> FrameSource:
        return self._snapshot().source

    def image(
        self, mime_type: str = MIME_JPEG, extra: dict[str, Any] | None = None
    ) -> tuple[bytes, ImageMetadata]:
        """Fetch a frame from the source, transform it and re-encode it.

        Errors from the source and from decoding propagate unchanged.

        Args:
            mime_type: Requested output encoding (JPEG if unsupported)
            extra: Passed through to the source

        Returns:
            Tuple of (encoded frame, metadata)

        Raises:
            PipelineError: If a transform step fails
        """
        state = self._snapshot()

        data, metadata = state.source.image(mime_type, extra)
        logger.debug(f"{self.name}: got {len(data)} bytes ({metadata.mime_type}) from {state.source.name}")

        frame = decode_image(data)
        result = apply_pipeline(frame, state.config.pipeline)

        encoded, out_mime = encode_image(result, mime_type)
        return encoded, ImageMetadata(mime_type=out_mime)

    def images(self) -> list[NamedImage]:
        """Untransformed frames from every sensor of the source."""
        return self._snapshot().source.images()

    def properties(self) -> CameraProperties:
        return self._snapshot().source.properties()

    def next_point_cloud(self) -> Any:
        raise NotImplementedError("point clouds are not supported")

    def do_command(self, cmd: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError("do_command is not supported")

    def close(self) -> None:
        """Release the camera. The source is owned by the caller and stays open."""
        self._state = None
        logger.info(f"Closed {self.name}")

    @property
    def is_closed(self) -> bool:
        return self._state is None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
