"""Error Hierarchy — codes, statuses and the REST envelope."""

from emoji_plugin.core.errors import (
    BlobNotFoundError, ConflictError, DuplicateShortcodeError, EmojiError,
    ErrorCategory, FeatureDisabledError, ForbiddenError, NotAnImageError,
)


def test_duplicate_shortcode_is_a_conflict():
    exc = DuplicateShortcodeError("smile")
    assert isinstance(exc, ConflictError)
    assert exc.http_status == 409
    assert exc.category == ErrorCategory.CONFLICT
    assert exc.context.shortcode == "smile"


def test_forbidden_names_the_permission():
    exc = ForbiddenError("emoji.add")
    assert exc.http_status == 403
    assert exc.permission == "emoji.add"
    assert '"emoji.add"' in exc.message


def test_blob_not_found_is_a_404_storage_error():
    exc = BlobNotFoundError("smile.png")
    assert exc.http_status == 404
    assert exc.code == "BLOB_NOT_FOUND"
    assert exc.key == "smile.png"


def test_to_response_envelope():
    body = NotAnImageError().to_response()["error"]
    assert body["code"] == "NOT_AN_IMAGE"
    assert body["category"] == "validation"
    assert body["severity"] == "error"
    assert "timestamp" in body
    assert body["context"] == {"shortcode": None, "user_id": None}


def test_all_domain_errors_share_the_base():
    assert issubclass(FeatureDisabledError, EmojiError)
    assert FeatureDisabledError().http_status == 501
