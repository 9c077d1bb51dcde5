"""Output locations for transcript artifacts."""

import posixpath

TRANSCRIPT_PREFIX = "transcripts/"
TRANSCRIPT_EXTENSION = ".txt"


def derive_transcript_object_name(source_key: str) -> str:
    """
    Converts a source audio key to its transcript object name.

    Only the base name survives: ``uploads/2024/call.MP3`` becomes
    ``transcripts/call.txt``.
    """
    base_name = posixpath.basename(source_key)
    stem = posixpath.splitext(base_name)[0]
    return f"{TRANSCRIPT_PREFIX}{stem}{TRANSCRIPT_EXTENSION}"


def object_location(bucket_name: str, object_name: str) -> str:
    """Formats a bucket/object pair as an ``s3://`` URI."""
    return f"s3://{bucket_name}/{object_name}"
