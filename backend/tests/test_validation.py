import pytest

from app.core.errors import AppError, ErrorKind
from app.services.validation import UploadValidator


@pytest.fixture
def validator(settings):
    return UploadValidator.from_settings(settings)


def test_allow_list_is_union_of_categories(validator):
    for content_type in ("image/jpeg", "video/mp4", "application/pdf", "audio/mpeg"):
        validator.validate_content_type(content_type)


def test_rejects_unlisted_content_type(validator):
    with pytest.raises(AppError) as excinfo:
        validator.validate_content_type("application/x-msdownload")
    assert excinfo.value.kind is ErrorKind.VALIDATION
    assert "application/x-msdownload is not allowed" in excinfo.value.message


def test_size_ceiling(validator):
    validator.validate_size(None)
    validator.validate_size(100 * 1024 * 1024)
    with pytest.raises(AppError) as excinfo:
        validator.validate_size(100 * 1024 * 1024 + 1)
    assert "exceeds maximum allowed size of 104857600 bytes (100 MB)" in excinfo.value.message


def test_custom_allow_list():
    validator = UploadValidator(["text/csv"], max_size_bytes=10)
    validator.validate_content_type("text/csv")
    with pytest.raises(AppError):
        validator.validate_content_type("image/png")


def test_size_message_uses_whole_megabytes_for_large_ceilings():
    validator = UploadValidator(["image/png"], max_size_bytes=1_000_000 * 1024 * 1024)
    with pytest.raises(AppError) as excinfo:
        validator.validate_size(1_000_000 * 1024 * 1024 + 1)
    assert "(1000000 MB)" in excinfo.value.message
