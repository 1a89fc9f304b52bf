"""Tests for transcript export and import."""

import json
from datetime import datetime, timezone

import pytest

from bargaining.errors import TranscriptFormatError
from bargaining.models import Decision, Proposer, Variant
from bargaining.recording import (
    export_filename,
    format_timestamp,
    history_from_json,
    history_to_csv,
    history_to_json,
    parse_csv,
    parse_timestamp,
    write_transcript,
)


@pytest.fixture
def alternating_view(alternating_session):
    alternating_session.start()
    alternating_session.counter(0.6)
    alternating_session.counter("garbage")
    return alternating_session.accept()


@pytest.fixture
def fixed_skew_view(fixed_skew_session):
    fixed_skew_session.start()
    fixed_skew_session.reject()
    return fixed_skew_session.reject()


class TestCsv:

    def test_fixed_skew_layout(self, fixed_skew_view):
        lines = history_to_csv(fixed_skew_view.history, Variant.FIXED_SKEW).split("\n")
        assert lines[0] == "sessionId,round,offerA,offerB,decision,timestamp"
        assert len(lines) == 3
        session_id, rnd, offer_a, offer_b, decision, ts = lines[1].split(",")
        assert session_id == fixed_skew_view.session_id
        assert rnd == "1"
        assert len(offer_a.split(".")[1]) == 6
        assert len(offer_b.split(".")[1]) == 6
        assert decision == "reject"
        assert ts.endswith("Z")

    def test_alternating_layout(self, alternating_view):
        lines = history_to_csv(alternating_view.history, Variant.ALTERNATING).split("\n")
        assert lines[0] == "sessionId,round,proposer,offerA,offerB,decision,counterA,timestamp"
        rows = [line.split(",") for line in lines[1:]]
        assert [r[2] for r in rows] == ["A", "B", "A"]
        assert [r[5] for r in rows] == ["counter", "counter", "accept"]
        assert rows[0][6] == "0.600000"
        assert rows[1][6] == ""
        assert rows[2][6] == ""

    def test_empty_history_is_header_only(self):
        assert history_to_csv([], Variant.FIXED_SKEW) == "sessionId,round,offerA,offerB,decision,timestamp"

    @pytest.mark.parametrize("variant_fixture,variant", [
        ("fixed_skew_view", Variant.FIXED_SKEW),
        ("alternating_view", Variant.ALTERNATING),
    ])
    def test_round_trip(self, request, variant_fixture, variant):
        view = request.getfixturevalue(variant_fixture)
        parsed = parse_csv(history_to_csv(view.history, variant))
        assert len(parsed) == len(view.history)
        for original, restored in zip(view.history, parsed):
            assert restored.session_id == original.session_id
            assert restored.round == original.round
            assert restored.decision is original.decision
            assert restored.offer_a == pytest.approx(original.offer_a, abs=1e-6)
            assert restored.offer_b == pytest.approx(original.offer_b, abs=1e-6)
            if original.counter_value is None:
                assert restored.counter_value is None
            else:
                assert restored.counter_value == pytest.approx(original.counter_value, abs=1e-6)
            if variant is Variant.ALTERNATING:
                assert restored.proposer is original.proposer
            else:
                assert restored.proposer is None
            assert abs((restored.timestamp - original.timestamp).total_seconds()) < 1e-3

    def test_unknown_header_rejected(self):
        with pytest.raises(TranscriptFormatError):
            parse_csv("id,round,offer\n1,2,3")

    def test_malformed_row_rejected(self):
        text = "sessionId,round,offerA,offerB,decision,timestamp\nabc,one,0.1,0.9,reject,2026-01-01T00:00:00.000Z"
        with pytest.raises(TranscriptFormatError):
            parse_csv(text)

    def test_unknown_decision_rejected(self):
        text = "sessionId,round,offerA,offerB,decision,timestamp\nabc,1,0.1,0.9,shrug,2026-01-01T00:00:00.000Z"
        with pytest.raises(TranscriptFormatError):
            parse_csv(text)


class TestJson:

    def test_pretty_printed_camel_case(self, alternating_view):
        text = history_to_json(alternating_view.history)
        assert text.startswith("[\n  {")
        data = json.loads(text)
        assert len(data) == 3
        assert set(data[0]) == {
            "sessionId", "round", "proposer", "offerA", "offerB",
            "decision", "counterValue", "timestamp",
        }
        assert data[0]["proposer"] == "A"
        assert data[0]["decision"] == "counter"
        assert data[1]["counterValue"] is None

    def test_round_trip(self, alternating_view):
        restored = history_from_json(history_to_json(alternating_view.history))
        assert [e.model_dump() for e in restored] == [e.model_dump() for e in alternating_view.history]
        assert restored[0].proposer is Proposer.A
        assert restored[2].decision is Decision.ACCEPT

    def test_invalid_json(self):
        with pytest.raises(TranscriptFormatError):
            history_from_json("{not json")

    def test_non_array_json(self):
        with pytest.raises(TranscriptFormatError):
            history_from_json('{"sessionId": "x"}')


class TestFiles:

    def test_timestamp_format(self):
        ts = datetime(2026, 10, 19, 8, 5, 3, 456789, tzinfo=timezone.utc)
        assert format_timestamp(ts) == "2026-10-19T08:05:03.456Z"
        assert parse_timestamp("2026-10-19T08:05:03.456Z") == ts.replace(microsecond=456000)

    def test_export_filename(self):
        assert export_filename("20261019123045", Variant.FIXED_SKEW) == "negotiation_b_favored_20261019123045.csv"
        assert export_filename("20261019123045", Variant.ALTERNATING, ".json") == \
            "negotiation_alternating_20261019123045.json"

    def test_write_csv_and_json(self, alternating_view, tmp_path):
        csv_path = write_transcript(alternating_view, tmp_path / "out" / "t.csv")
        json_path = write_transcript(alternating_view, tmp_path / "t.json")
        assert len(parse_csv(csv_path.read_text(encoding="utf-8"))) == 3
        assert len(history_from_json(json_path.read_text(encoding="utf-8"))) == 3

    def test_write_unsupported_suffix(self, alternating_view, tmp_path):
        with pytest.raises(TranscriptFormatError):
            write_transcript(alternating_view, tmp_path / "t.txt")
