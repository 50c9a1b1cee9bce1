import pytest

from twinsamples.config import (
    StreamingConsumerSettings,
    StreamingProviderSettings,
    load_streaming_consumer_settings,
    load_streaming_provider_settings,
)


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_consumer_settings_full(tmp_path):
    path = write(
        tmp_path / "consumer.yaml",
        "invehicle_digital_twin_uri: http://localhost:5010\n"
        "chariott_uri: http://localhost:50000\n"
        "number_of_images: 20\n",
    )
    assert load_streaming_consumer_settings(path) == StreamingConsumerSettings(
        number_of_images=20,
        chariott_uri="http://localhost:50000",
        invehicle_digital_twin_uri="http://localhost:5010",
    )


def test_consumer_optional_fields_default_to_none(tmp_path):
    path = write(tmp_path / "consumer.yaml", "number_of_images: 3\n")
    settings = load_streaming_consumer_settings(path)
    assert settings.chariott_uri is None
    assert settings.invehicle_digital_twin_uri is None
    assert settings.number_of_images == 3


def test_consumer_missing_number_of_images(tmp_path):
    path = write(tmp_path / "consumer.yaml", "chariott_uri: http://localhost:50000\n")
    with pytest.raises(ValueError, match="number_of_images"):
        load_streaming_consumer_settings(path)


@pytest.mark.parametrize("value", ["-1", "70000", "many", "true"])
def test_consumer_invalid_number_of_images(tmp_path, value):
    path = write(tmp_path / "consumer.yaml", f"number_of_images: {value}\n")
    with pytest.raises(ValueError):
        load_streaming_consumer_settings(path)


def test_extension_is_added_when_missing(tmp_path):
    write(tmp_path / "streaming_consumer_settings.yaml", "number_of_images: 7\n")
    settings = load_streaming_consumer_settings(tmp_path / "streaming_consumer_settings")
    assert settings.number_of_images == 7


def test_yml_extension_is_found(tmp_path):
    write(
        tmp_path / "streaming_provider_settings.yml",
        "provider_authority: 0.0.0.0:4011\nimage_directory: images\n",
    )
    settings = load_streaming_provider_settings(tmp_path / "streaming_provider_settings")
    assert settings.provider_authority == "0.0.0.0:4011"
    assert settings.image_directory == "images"


def test_provider_settings_full(tmp_path):
    path = write(
        tmp_path / "provider.yaml",
        "provider_authority: 0.0.0.0:4011\n"
        "invehicle_digital_twin_uri: http://localhost:5010\n"
        "image_directory: /tmp/images\n",
    )
    assert load_streaming_provider_settings(path) == StreamingProviderSettings(
        provider_authority="0.0.0.0:4011",
        image_directory="/tmp/images",
        chariott_uri=None,
        invehicle_digital_twin_uri="http://localhost:5010",
    )


def test_provider_missing_image_directory(tmp_path):
    path = write(tmp_path / "provider.yaml", "provider_authority: 0.0.0.0:4011\n")
    with pytest.raises(ValueError, match="image_directory"):
        load_streaming_provider_settings(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_streaming_provider_settings(tmp_path / "absent")


def test_document_must_be_mapping(tmp_path):
    path = write(tmp_path / "provider.yaml", "- one\n- two\n")
    with pytest.raises(ValueError, match="mapping"):
        load_streaming_provider_settings(path)


def test_empty_document_reports_missing_field(tmp_path):
    path = write(tmp_path / "consumer.yaml", "")
    with pytest.raises(ValueError, match="missing field"):
        load_streaming_consumer_settings(path)