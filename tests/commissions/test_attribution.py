"""Tests for affiliate attribution."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from checkout_settlement.commissions.attribution import resolve_affiliate
from checkout_settlement.core.types import AttributionEvent, AttributionModel

_T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _events() -> list[AttributionEvent]:
    return [
        AttributionEvent("A", _T0),
        AttributionEvent("B", _T0 + timedelta(hours=2)),
    ]


class TestResolveAffiliate:
    def test_last_click_picks_latest(self) -> None:
        assert resolve_affiliate(_events(), AttributionModel.LAST_CLICK) == "B"

    def test_first_click_picks_earliest(self) -> None:
        assert resolve_affiliate(_events(), AttributionModel.FIRST_CLICK) == "A"

    def test_input_order_does_not_matter(self) -> None:
        events = list(reversed(_events()))

        assert resolve_affiliate(events, AttributionModel.LAST_CLICK) == "B"
        assert resolve_affiliate(events, AttributionModel.FIRST_CLICK) == "A"

    def test_no_events(self) -> None:
        assert resolve_affiliate([], AttributionModel.LAST_CLICK) is None

    @pytest.mark.parametrize("model", list(AttributionModel))
    def test_tie_broken_by_lowest_affiliate_id(self, model) -> None:
        events = [
            AttributionEvent("zeta", _T0),
            AttributionEvent("alpha", _T0),
            AttributionEvent("mid", _T0),
        ]

        assert resolve_affiliate(events, model) == "alpha"

    def test_epoch_timestamps(self) -> None:
        events = [AttributionEvent("A", 1700000000.0), AttributionEvent("B", 1700000500.5)]

        assert resolve_affiliate(events, AttributionModel.LAST_CLICK) == "B"

    def test_session_filter(self) -> None:
        events = [
            AttributionEvent("A", _T0, session_id="s-1"),
            AttributionEvent("B", _T0 + timedelta(hours=1), session_id="s-2"),
        ]

        resolved = resolve_affiliate(events, AttributionModel.LAST_CLICK, session_id="s-1")

        assert resolved == "A"

    def test_session_filter_without_matches(self) -> None:
        resolved = resolve_affiliate(
            _events(), AttributionModel.LAST_CLICK, session_id="other"
        )

        assert resolved is None


class TestResolveAffiliateMixedTimestamps:
    def test_epoch_and_datetime_events(self) -> None:
        events = [
            AttributionEvent("A", 10),
            AttributionEvent("B", datetime(2026, 3, 1, 12, 0, tzinfo=UTC)),
        ]

        assert resolve_affiliate(events, AttributionModel.LAST_CLICK) == "B"
        assert resolve_affiliate(events, AttributionModel.FIRST_CLICK) == "A"

    def test_naive_datetime_read_as_utc(self) -> None:
        events = [
            AttributionEvent("A", datetime(2026, 3, 1, 12, 0)),
            AttributionEvent("B", datetime(2026, 3, 1, 13, 0, tzinfo=UTC)),
        ]

        assert resolve_affiliate(events, AttributionModel.LAST_CLICK) == "B"
        assert resolve_affiliate(events, AttributionModel.FIRST_CLICK) == "A"

    def test_same_instant_in_naive_and_aware_form_is_a_tie(self) -> None:
        events = [
            AttributionEvent("zeta", datetime(2026, 3, 1, 12, 0)),
            AttributionEvent("alpha", _T0),
        ]

        assert resolve_affiliate(events, AttributionModel.LAST_CLICK) == "alpha"

    def test_ids_compare_as_strings(self) -> None:
        events = [AttributionEvent("9", _T0), AttributionEvent("10", _T0)]

        assert resolve_affiliate(events, AttributionModel.LAST_CLICK) == "10"
