"""Unit tests for the vector sink and the record-id scheme."""

from __future__ import annotations

import pytest

from site_rag.ingestion.errors import SinkError
from site_rag.ingestion.sink import VectorSink
from site_rag.retrieval.models import VectorRecord, chunk_index_from_id, make_record_id


def _record(i: int, url: str = "https://example.com/") -> VectorRecord:
    return VectorRecord.for_chunk(url, i, f"chunk {i}", [0.1, 0.2, 0.3])


def _drive(sink: VectorSink, n: int) -> None:
    """Follow the orchestrator's protocol: flush when full, then at the end."""
    for i in range(n):
        if sink.add(_record(i)):
            sink.flush()
    sink.flush()


# ──────────────────────────────────────────────────────────────────────
# Record ids
# ──────────────────────────────────────────────────────────────────────


class TestRecordIds:
    def test_non_alphanumeric_characters_replaced(self) -> None:
        assert (
            make_record_id("https://www.bitsathy.ac.in/department/", 2)
            == "https___www_bitsathy_ac_in_department__chunk_2"
        )

    def test_ids_unique_across_urls_and_indices(self) -> None:
        urls = ["https://a.example.com/", "https://a.example.com/x", "https://b.example.com/"]
        ids = [make_record_id(u, i) for u in urls for i in range(12)]
        assert len(ids) == len(set(ids))

    def test_chunk_index_round_trip(self) -> None:
        assert chunk_index_from_id(make_record_id("https://a.example.com/", 11)) == 11
        assert chunk_index_from_id("not-a-chunk-id") is None

    def test_record_metadata_shape(self) -> None:
        record = _record(0)
        dumped = record.model_dump()
        assert set(dumped) == {"id", "values", "metadata"}
        assert set(dumped["metadata"]) == {"url", "content", "timestamp"}
        assert dumped["metadata"]["timestamp"].endswith("+00:00")


# ──────────────────────────────────────────────────────────────────────
# VectorSink
# ──────────────────────────────────────────────────────────────────────


class TestVectorSink:
    @pytest.mark.parametrize("n", [0, 1, 9, 10, 11, 25, 30])
    def test_every_record_upserted_once_within_batch_size(self, recording_store, n: int) -> None:
        sink = VectorSink(recording_store, batch_size=10)
        _drive(sink, n)

        assert all(1 <= len(batch) <= 10 for batch in recording_store.calls)
        ids = recording_store.upserted_ids
        assert len(ids) == n
        assert len(set(ids)) == n
        assert sink.pending == 0
        assert sink.flushed == n

    def test_add_reports_full_buffer(self, recording_store) -> None:
        sink = VectorSink(recording_store, batch_size=2)
        assert sink.add(_record(0)) is False
        assert sink.add(_record(1)) is True
        assert recording_store.calls == []

    def test_add_refuses_to_overfill(self, recording_store) -> None:
        sink = VectorSink(recording_store, batch_size=1)
        sink.add(_record(0))
        with pytest.raises(SinkError, match="flush before adding"):
            sink.add(_record(1))

    def test_flush_empty_buffer_is_noop(self, recording_store) -> None:
        sink = VectorSink(recording_store)
        assert sink.flush() == 0
        assert recording_store.calls == []

    def test_failed_upsert_clears_buffer_and_wraps_error(self, recording_store) -> None:
        recording_store.fail_on = {1}
        sink = VectorSink(recording_store, batch_size=3)
        for i in range(3):
            sink.add(_record(i))

        with pytest.raises(SinkError) as excinfo:
            sink.flush()
        assert isinstance(excinfo.value.__cause__, ConnectionError)
        assert excinfo.value.details["records"] == 3
        assert excinfo.value.urls == ["https://example.com/"]
        assert sink.pending == 0
        assert sink.flushed == 0

        # the failed batch is not re-sent on the next flush
        sink.add(_record(3))
        assert sink.flush() == 1
        assert recording_store.upserted_ids == [_record(3).id]

    def test_rejects_non_positive_batch_size(self, recording_store) -> None:
        with pytest.raises(ValueError, match="batch_size"):
            VectorSink(recording_store, batch_size=0)


def test_failed_batch_names_each_url_once_in_buffer_order(failing_store) -> None:
    sink = VectorSink(failing_store(1), batch_size=4)
    for i, url in enumerate(["https://a.example.com/", "https://b.example.com/", "https://a.example.com/"]):
        sink.add(_record(i, url))

    with pytest.raises(SinkError) as excinfo:
        sink.flush()
    assert excinfo.value.urls == ["https://a.example.com/", "https://b.example.com/"]
