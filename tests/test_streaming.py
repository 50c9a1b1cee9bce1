import pytest

from twinsamples.messages import (
    GetRequest,
    InvokeRequest,
    SetRequest,
    StatusCode,
    StatusError,
    StreamRequest,
    SubscribeRequest,
    UnsubscribeRequest,
)
from twinsamples.streaming import JPEG_IMAGES, ImageFileIterator, StreamingProvider


@pytest.fixture
def image_dir(tmp_path):
    (tmp_path / "b.jpg").write_bytes(b"second")
    (tmp_path / "a.jpg").write_bytes(b"first")
    (tmp_path / "sub").mkdir()
    return tmp_path


def test_iterator_cycles_through_files(image_dir):
    images = ImageFileIterator(image_dir, ["a.jpg", "b.jpg"])
    contents = [next(images).media.media_content for _ in range(5)]
    assert contents == [b"first", b"second", b"first", b"second", b"first"]


def test_iterator_sets_jpeg_media_type(image_dir):
    response = next(ImageFileIterator(image_dir, ["a.jpg"]))
    assert response.media.media_type == JPEG_IMAGES
    assert JPEG_IMAGES == "image/jpeg"


def test_iterator_with_no_files_stops(image_dir):
    assert list(ImageFileIterator(image_dir, [])) == []


def test_iterator_stops_at_unreadable_file(image_dir):
    images = ImageFileIterator(image_dir, ["a.jpg", "missing.jpg"])
    first = next(images)
    assert first.media.media_content == b"first"
    with pytest.raises(StopIteration):
        next(images)


def test_image_filenames_skips_directories_and_sorts(image_dir):
    provider = StreamingProvider(image_dir)
    assert provider.image_filenames() == ["a.jpg", "b.jpg"]


def test_image_filenames_empty_directory(tmp_path):
    with pytest.raises(ValueError, match="No images"):
        StreamingProvider(tmp_path).image_filenames()


def test_image_filenames_missing_directory(tmp_path):
    with pytest.raises(OSError):
        StreamingProvider(tmp_path / "absent").image_filenames()


@pytest.mark.asyncio
async def test_stream_yields_images_in_order(image_dir):
    provider = StreamingProvider(image_dir, throttle_seconds=0)
    stream = await provider.stream(StreamRequest(entity_id="camera"))
    received = []
    async for item in stream:
        received.append(item.media.media_content)
        if len(received) == 3:
            break
    await stream.aclose()
    assert received == [b"first", b"second", b"first"]


@pytest.mark.asyncio
async def test_stream_missing_directory_is_internal_error(tmp_path):
    provider = StreamingProvider(tmp_path / "absent")
    with pytest.raises(StatusError) as info:
        await provider.stream(StreamRequest(entity_id="camera"))
    assert info.value.code is StatusCode.INTERNAL
    assert info.value.message.startswith("Get filenames failed due to:")


@pytest.mark.asyncio
async def test_subscribe_is_unimplemented(image_dir):
    provider = StreamingProvider(image_dir)
    with pytest.raises(StatusError) as info:
        await provider.subscribe(SubscribeRequest())
    assert info.value.code is StatusCode.UNIMPLEMENTED
    assert info.value.message == "subscribe has not been implemented"


@pytest.mark.asyncio
async def test_unsubscribe_is_unimplemented(image_dir):
    provider = StreamingProvider(image_dir)
    with pytest.raises(StatusError) as info:
        await provider.unsubscribe(UnsubscribeRequest())
    assert info.value.code is StatusCode.UNIMPLEMENTED
    assert info.value.message == "unsubscribe has not been implemented"


@pytest.mark.asyncio
async def test_get_is_unimplemented(image_dir):
    provider = StreamingProvider(image_dir)
    with pytest.raises(StatusError) as info:
        await provider.get(GetRequest())
    assert info.value.code is StatusCode.UNIMPLEMENTED
    assert info.value.message == "get has not been implemented"


@pytest.mark.asyncio
async def test_set_is_unimplemented(image_dir):
    provider = StreamingProvider(image_dir)
    with pytest.raises(StatusError) as info:
        await provider.set(SetRequest())
    assert info.value.code is StatusCode.UNIMPLEMENTED
    assert info.value.message == "set has not been implemented"


@pytest.mark.asyncio
async def test_invoke_is_unimplemented(image_dir):
    provider = StreamingProvider(image_dir)
    with pytest.raises(StatusError) as info:
        await provider.invoke(InvokeRequest())
    assert info.value.code is StatusCode.UNIMPLEMENTED
    assert info.value.message == "invoke has not been implemented"