"""Provider of the streaming sample: streams image files from a directory."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Iterable
from pathlib import Path
from typing import Union

from twinsamples.messages import (
    GetRequest,
    InvokeRequest,
    Media,
    SetRequest,
    StatusError,
    StreamRequest,
    StreamResponse,
    SubscribeRequest,
    UnsubscribeRequest,
)

logger = logging.getLogger(__name__)

JPEG_IMAGES = "image/jpeg"
DEFAULT_THROTTLE_SECONDS = 5.0

PathLike = Union[str, "os.PathLike[str]"]


class ImageFileIterator:
    """Endlessly cycles through image files, yielding each as a stream response.

    Iteration ends when there are no filenames or when a file cannot be read.
    """

    def __init__(self, image_directory: PathLike, image_filenames: Iterable[str]) -> None:
        self.image_directory = Path(image_directory)
        self.image_filenames = list(image_filenames)
        self._index = 0

    def _read_image_file(self, filename: str) -> bytes:
        filepath = self.image_directory / filename
        logger.debug("Read_image from '%s'", filepath)
        return filepath.read_bytes()

    def __iter__(self) -> "ImageFileIterator":
        return self

    def __next__(self) -> StreamResponse:
        if not self.image_filenames:
            raise StopIteration
        filename = self.image_filenames[self._index]
        self._index = (self._index + 1) % len(self.image_filenames)
        try:
            content = self._read_image_file(filename)
        except OSError as err:
            logger.warning("Failed to read image '%s' due to: %s", filename, err)
            raise StopIteration from err
        return StreamResponse(media=Media(media_type=JPEG_IMAGES, media_content=content))


class StreamingProvider:
    """Provider that streams the images found in a directory, one at a time."""

    def __init__(
        self,
        image_directory: PathLike,
        throttle_seconds: float = DEFAULT_THROTTLE_SECONDS,
    ) -> None:
        self.image_directory = Path(image_directory)
        self.throttle_seconds = throttle_seconds

    def image_filenames(self) -> list[str]:
        """Names of the regular files in the image directory, sorted.

        Raises OSError if the directory cannot be read and ValueError if it
        holds no files.
        """
        images = sorted(
            entry.name for entry in os.scandir(self.image_directory) if entry.is_file()
        )
        if not images:
            raise ValueError("No images")
        return images

    async def subscribe(self, request: SubscribeRequest) -> None:
        logger.warning("Got a subscribe request: %r", request)
        raise StatusError.unimplemented("subscribe has not been implemented")

    async def unsubscribe(self, request: UnsubscribeRequest) -> None:
        logger.warning("Got an unsubscribe request: %r", request)
        raise StatusError.unimplemented("unsubscribe has not been implemented")

    async def get(self, request: GetRequest) -> None:
        logger.warning("Got a get request: %r", request)
        raise StatusError.unimplemented("get has not been implemented")

    async def set(self, request: SetRequest) -> None:
        logger.warning("Got a set request: %r", request)
        raise StatusError.unimplemented("set has not been implemented")

    async def invoke(self, request: InvokeRequest) -> None:
        logger.warning("Got an invoke request: %r", request)
        raise StatusError.unimplemented("invoke has not been implemented")

    async def stream(self, request: StreamRequest) -> AsyncIterator[StreamResponse]:
        """Return an endless, throttled stream of the directory's images."""
        try:
            filenames = self.image_filenames()
        except OSError as err:
            raise StatusError.internal(f"Get filenames failed due to: {err}") from err
        return self._throttled(ImageFileIterator(self.image_directory, filenames))

    async def _throttled(
        self, images: ImageFileIterator
    ) -> AsyncIterator[StreamResponse]:
        first = True
        try:
            for item in images:
                if not first:
                    await asyncio.sleep(self.throttle_seconds)
                first = False
                yield item
                logger.debug(
                    "The next item in the stream was successfully sent to the client."
                )
        finally:
            logger.info("Client disconnected")