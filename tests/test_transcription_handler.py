import pytest

from audio_transcription.db_models import TranscriptionRecord, TranscriptionStatus
from audio_transcription.domain import ProcessingStatus
from audio_transcription.exceptions import (
    PresignedURLError,
    StateStoreError,
    TranscriptionError,
)
from audio_transcription.handlers import TranscriptionHandler

from fakes import FakeStorage, FakeTranscriptionService

SOURCE_BUCKET = "uploads"
SOURCE_KEY = "calls/2024/Meeting Notes.MP3"


class TickingClock:
    def __init__(self, *values):
        self._values = list(values)

    def __call__(self):
        return self._values.pop(0)


class FlakyStore:
    """Wraps a real store and fails update_status for chosen statuses."""

    def __init__(self, store, failing_statuses):
        self._store = store
        self._failing = set(failing_statuses)

    def try_claim(self, *args, **kwargs):
        return self._store.try_claim(*args, **kwargs)

    def update_status(self, file_identifier, status, **fields):
        if status in self._failing:
            raise StateStoreError(file_identifier, "update")
        return self._store.update_status(file_identifier, status, **fields)


def _handler(store, storage, transcriber, **kwargs):
    kwargs.setdefault("clock", TickingClock(100.0, 104.25))
    return TranscriptionHandler(
        storage=storage,
        state_store=store,
        transcription_service=transcriber,
        **kwargs,
    )


def _seed(store, status):
    store.create(
        TranscriptionRecord(
            file_identifier=SOURCE_KEY,
            status=status,
            source_bucket=SOURCE_BUCKET,
            source_key=SOURCE_KEY,
        )
    )


def test_new_file_is_transcribed_and_completed(store, storage, transcriber):
    result = _handler(store, storage, transcriber).process(SOURCE_BUCKET, SOURCE_KEY)

    assert result.status == ProcessingStatus.COMPLETED
    assert result.processing_time == pytest.approx(4.25)
    assert storage.presign_calls == [(SOURCE_BUCKET, SOURCE_KEY, 3600)]
    assert len(transcriber.calls) == 1

    record = store.get(SOURCE_KEY)
    assert record.status == TranscriptionStatus.COMPLETED
    assert record.transcript_text == "hello world"
    assert record.processing_time == pytest.approx(4.25)
    assert record.output_location is None
    assert record.error_message is None


def test_record_is_in_progress_before_transcription_call(store, storage):
    seen = []
    transcriber = FakeTranscriptionService(
        on_call=lambda url: seen.append(store.get(SOURCE_KEY))
    )

    _handler(store, storage, transcriber).process(SOURCE_BUCKET, SOURCE_KEY)

    assert len(seen) == 1
    assert seen[0].status == TranscriptionStatus.IN_PROGRESS
    assert seen[0].source_bucket == SOURCE_BUCKET


@pytest.mark.parametrize(
    "status", [TranscriptionStatus.COMPLETED, TranscriptionStatus.IN_PROGRESS]
)
def test_completed_or_in_flight_file_is_skipped(store, storage, transcriber, status):
    _seed(store, status)

    result = _handler(store, storage, transcriber).process(SOURCE_BUCKET, SOURCE_KEY)

    assert result.status == ProcessingStatus.SKIPPED
    assert storage.call_count == 0
    assert transcriber.calls == []
    assert store.get(SOURCE_KEY).status == status


def test_failed_file_is_retried(store, storage, transcriber):
    _seed(store, TranscriptionStatus.FAILED)

    result = _handler(store, storage, transcriber).process(SOURCE_BUCKET, SOURCE_KEY)

    assert result.status == ProcessingStatus.COMPLETED
    assert store.get(SOURCE_KEY).status == TranscriptionStatus.COMPLETED


def test_pending_file_is_processed(store, storage, transcriber):
    _seed(store, TranscriptionStatus.PENDING)

    result = _handler(store, storage, transcriber).process(SOURCE_BUCKET, SOURCE_KEY)

    assert result.status == ProcessingStatus.COMPLETED
    assert len(transcriber.calls) == 1
    assert store.get(SOURCE_KEY).status == TranscriptionStatus.COMPLETED


@pytest.mark.parametrize(
    ("stale_in_progress_seconds", "expected"),
    [(60, ProcessingStatus.COMPLETED), (0, ProcessingStatus.SKIPPED)],
)
def test_stale_in_progress_file_is_reprocessed_only_with_threshold(
    store, storage, transcriber, stale_in_progress_seconds, expected
):
    # Seeded at the store clock's fixed 2024 timestamp, long before now.
    _seed(store, TranscriptionStatus.IN_PROGRESS)

    result = _handler(
        store,
        storage,
        transcriber,
        stale_in_progress_seconds=stale_in_progress_seconds,
    ).process(SOURCE_BUCKET, SOURCE_KEY)

    assert result.status == expected
    if expected == ProcessingStatus.COMPLETED:
        assert len(transcriber.calls) == 1
        assert store.get(SOURCE_KEY).status == TranscriptionStatus.COMPLETED
    else:
        assert transcriber.calls == []
        assert store.get(SOURCE_KEY).status == TranscriptionStatus.IN_PROGRESS


def test_presign_failure_marks_record_failed(store, transcriber):
    storage = FakeStorage(presign_error=RuntimeError("NoSuchKey"))

    with pytest.raises(PresignedURLError):
        _handler(store, storage, transcriber).process(SOURCE_BUCKET, SOURCE_KEY)

    assert transcriber.calls == []
    record = store.get(SOURCE_KEY)
    assert record.status == TranscriptionStatus.FAILED
    assert record.error_message == "Failed to generate pre-signed URL: NoSuchKey"
    assert record.transcript_text is None


def test_transcription_failure_marks_record_failed(store, storage):
    transcriber = FakeTranscriptionService(error="Invalid audio format")

    with pytest.raises(TranscriptionError):
        _handler(store, storage, transcriber).process(SOURCE_BUCKET, SOURCE_KEY)

    record = store.get(SOURCE_KEY)
    assert record.status == TranscriptionStatus.FAILED
    assert "Invalid audio format" in record.error_message
    assert record.processing_time is None
    assert record.transcript_text is None


class ResettingTranscriptionService(FakeTranscriptionService):
    def transcribe_audio(self, audio_url):
        self.calls.append(audio_url)
        raise RuntimeError("connection reset")


class BrokenPresignStorage(FakeStorage):
    def generate_presigned_url(self, bucket_name, object_name, ttl_seconds):
        raise RuntimeError("signer unavailable")


def test_unexpected_transcription_error_marks_record_failed(store, storage):
    transcriber = ResettingTranscriptionService()

    with pytest.raises(RuntimeError, match="connection reset"):
        _handler(store, storage, transcriber).process(SOURCE_BUCKET, SOURCE_KEY)

    record = store.get(SOURCE_KEY)
    assert record.status == TranscriptionStatus.FAILED
    assert record.error_message == "Transcription API error: connection reset"


def test_unexpected_presign_error_marks_record_failed(store, transcriber):
    with pytest.raises(RuntimeError, match="signer unavailable"):
        _handler(store, BrokenPresignStorage(), transcriber).process(
            SOURCE_BUCKET, SOURCE_KEY
        )

    assert transcriber.calls == []
    record = store.get(SOURCE_KEY)
    assert record.status == TranscriptionStatus.FAILED
    assert record.error_message == "Failed to generate pre-signed URL: signer unavailable"


def test_failed_status_write_does_not_mask_primary_error(store, storage):
    transcriber = FakeTranscriptionService(error="quota exceeded")
    flaky = FlakyStore(store, {TranscriptionStatus.FAILED})

    with pytest.raises(TranscriptionError, match="quota exceeded"):
        _handler(flaky, storage, transcriber).process(SOURCE_BUCKET, SOURCE_KEY)


def test_transcript_uploaded_to_derived_location(store, transcriber):
    storage = FakeStorage()

    result = _handler(
        store, storage, transcriber, output_bucket="transcripts-out"
    ).process(SOURCE_BUCKET, SOURCE_KEY)

    expected = "s3://transcripts-out/transcripts/Meeting Notes.txt"
    assert result.output_location == expected
    assert storage.uploads == {
        ("transcripts-out", "transcripts/Meeting Notes.txt"): "hello world"
    }
    assert store.get(SOURCE_KEY).output_location == expected


def test_upload_failure_is_not_fatal(store, transcriber):
    storage = FakeStorage(upload_error=RuntimeError("AccessDenied"))

    result = _handler(
        store, storage, transcriber, output_bucket="transcripts-out"
    ).process(SOURCE_BUCKET, SOURCE_KEY)

    assert result.status == ProcessingStatus.COMPLETED
    assert result.output_location is None
    record = store.get(SOURCE_KEY)
    assert record.status == TranscriptionStatus.COMPLETED
    assert record.transcript_text == "hello world"
    assert record.output_location is None


def test_empty_transcript_is_not_uploaded(store, storage):
    transcriber = FakeTranscriptionService(text="")

    result = _handler(
        store, storage, transcriber, output_bucket="transcripts-out"
    ).process(SOURCE_BUCKET, SOURCE_KEY)

    assert result.status == ProcessingStatus.COMPLETED
    assert storage.uploads == {}
    assert store.get(SOURCE_KEY).status == TranscriptionStatus.COMPLETED


def test_completed_status_write_failure_still_succeeds(store, storage, transcriber):
    flaky = FlakyStore(store, {TranscriptionStatus.COMPLETED})

    result = _handler(flaky, storage, transcriber).process(SOURCE_BUCKET, SOURCE_KEY)

    assert result.status == ProcessingStatus.COMPLETED
    assert store.get(SOURCE_KEY).status == TranscriptionStatus.IN_PROGRESS


def test_custom_presigned_url_ttl(store, storage, transcriber):
    _handler(store, storage, transcriber, presigned_url_ttl_seconds=600).process(
        SOURCE_BUCKET, SOURCE_KEY
    )

    assert storage.presign_calls[0][2] == 600
