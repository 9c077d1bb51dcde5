from datetime import datetime, timezone

import pytest
from sqlalchemy import MetaData
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from audio_transcription.db_models import transcriptions_table
from audio_transcription.infrastructure import SQLTranscriptionStore

from fakes import FakeClock, FakeStorage, FakeTranscriptionService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def table(engine):
    metadata = MetaData()
    table = transcriptions_table("transcriptions", metadata)
    metadata.create_all(engine)
    return table


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(engine, table, clock):
    return SQLTranscriptionStore(engine, table, clock=clock)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def transcriber():
    return FakeTranscriptionService()
