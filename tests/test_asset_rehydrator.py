import base64
import os

import pytest

from shared.history.AssetRehydrator import AssetRehydrator, build_document_filename
from shared.models.document import DecodedDocument, DecodeFailure, DecodeFailureReason


@pytest.fixture
def rehydrator(helper_config) -> AssetRehydrator:
    return AssetRehydrator(helper_config=helper_config)


def test_reopen_stored_document(rehydrator, make_entry, pdf_bytes):
    outcome = rehydrator.reopen(make_entry(1))
    assert isinstance(outcome, DecodedDocument)
    assert outcome.content == pdf_bytes
    assert outcome.verified is True


def test_reopen_contaminated_entry(rehydrator, make_entry, pdf_bytes, pdf_b64):
    entry = make_entry(1, encoded="```\ndata:application/pdf;base64," + pdf_b64 + "\n```")
    assert rehydrator.reopen(entry).content == pdf_bytes


@pytest.mark.parametrize("encoded", ["", "   ", "!!!"])
def test_empty_entry_is_missing_data(rehydrator, make_entry, encoded):
    outcome = rehydrator.reopen(make_entry(1, encoded=encoded))
    assert isinstance(outcome, DecodeFailure)
    assert outcome.reason == DecodeFailureReason.MISSING_DATA


def test_short_foreign_entry_is_not_a_document(rehydrator, make_entry):
    encoded = base64.b64encode(b"<html>error</html>").decode("ascii")
    outcome = rehydrator.reopen(make_entry(1, encoded=encoded))
    assert outcome.reason == DecodeFailureReason.NOT_A_DOCUMENT


def test_broken_entry_is_malformed(rehydrator, make_entry):
    outcome = rehydrator.reopen(make_entry(1, encoded="QQ==QQ=="))
    assert outcome.reason == DecodeFailureReason.MALFORMED_ENCODING


def test_missing_and_corrupt_have_distinct_messages(rehydrator, make_entry):
    missing = rehydrator.reopen(make_entry(1, encoded=""))
    corrupt = rehydrator.reopen(make_entry(2, encoded="QQ==QQ=="))
    assert missing.message != corrupt.message


def test_open_handle_writes_and_releases(rehydrator, make_entry, pdf_bytes):
    entry = make_entry(1)
    document = rehydrator.reopen(entry)

    handle = rehydrator.open_handle(document, entry.category, entry.createdAt)
    assert handle.filename == build_document_filename(entry.category, entry.createdAt)
    assert handle.filename.startswith("cover_letter_") and handle.filename.endswith(".pdf")
    assert handle.media_type == "application/pdf"
    assert handle.read_bytes() == pdf_bytes

    handle.release()
    assert handle.is_released()
    handle.release()


def test_handle_as_context_manager(rehydrator, pdf_bytes):
    document = DecodedDocument(content=pdf_bytes)
    with rehydrator.open_handle(document, "resume_summary") as handle:
        path = handle.path
        assert os.path.exists(path)
    assert not os.path.exists(path)


def test_filename_uses_epoch_millis(make_entry):
    entry = make_entry(1)
    expected = int(entry.createdAt.timestamp() * 1000)
    assert build_document_filename("cover_letter", entry.createdAt) == f"cover_letter_{expected}.pdf"
