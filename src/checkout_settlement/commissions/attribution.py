"""Affiliate attribution: pick the referral credited with the order."""

from __future__ import annotations

from collections.abc import Iterable

from checkout_settlement.core.types import AttributionEvent, AttributionModel


def resolve_affiliate(
    events: Iterable[AttributionEvent],
    model: AttributionModel,
    session_id: str | None = None,
) -> str | None:
    """Select the affiliate credited with the order.

    ``first_click`` picks the earliest event and ``last_click`` the latest.
    Events sharing the winning timestamp are broken by the lowest
    ``affiliate_id`` under both models. Ids compare as strings, so ``"10"``
    ranks before ``"9"``.

    This does not check that the affiliate is still linked to the checkout;
    the ledger builder drops unlinked affiliates.

    Args:
        events: Referral events from the tracking collaborator
        model: Attribution model configured on the checkout
        session_id: When set, only events of this customer/session count

    Returns:
        The credited affiliate id, or None when there are no events.
    """
    candidates = [
        event
        for event in events
        if session_id is None or event.session_id == session_id
    ]
    if not candidates:
        return None

    if model is AttributionModel.FIRST_CLICK:
        winning_ts = min(event.occurred_at for event in candidates)
    else:
        winning_ts = max(event.occurred_at for event in candidates)

    return min(
        event.affiliate_id for event in candidates if event.occurred_at == winning_ts
    )
