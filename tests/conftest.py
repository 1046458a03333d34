import pytest

from .helpers import RecordingAdapter


@pytest.fixture
def adapter():
    return RecordingAdapter()
