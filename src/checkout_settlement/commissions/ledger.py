"""Commission ledger: one payout entry per commission-earning party."""

from __future__ import annotations

from collections.abc import Iterable

from checkout_settlement.core.money import percent_of
from checkout_settlement.core.types import (
    AffiliateLink,
    CommissionLedgerEntry,
    CommissionTerms,
    CommissionType,
    PartnerTerms,
    PartyKind,
)


def compute_commission_cents(
    commissionable_base_cents: int, terms: CommissionTerms
) -> tuple[int, bool]:
    """Compute one party's payout.

    Percentage terms are rounded half-up on the base. Fixed terms pay their
    flat amount, capped at the base so no single party is paid more than the
    sale's commissionable value.

    Returns:
        Tuple of (amount in cents, whether the fixed cap was applied).
    """
    if terms.commission_type is CommissionType.PERCENTAGE:
        return percent_of(commissionable_base_cents, terms.commission_value), False

    amount = int(terms.commission_value)
    if amount > commissionable_base_cents:
        return commissionable_base_cents, True
    return amount, False


def find_affiliate_link(
    affiliate_id: str | None, affiliate_links: Iterable[AffiliateLink]
) -> AffiliateLink | None:
    """Return the checkout's link for ``affiliate_id``, if it is still linked."""
    if affiliate_id is None:
        return None
    for link in affiliate_links:
        if link.affiliate_id == affiliate_id:
            return link
    return None


def build_ledger(
    commissionable_base_cents: int,
    resolved_affiliate_id: str | None,
    affiliate_links: Iterable[AffiliateLink],
    partner_terms: PartnerTerms,
) -> tuple[CommissionLedgerEntry, ...]:
    """Build the commission ledger for a settled order.

    Entries come out as affiliate, industry, factory, coproducer, skipping
    parties that are not configured. A resolved affiliate with no link on
    this checkout earns nothing. Entries are independent: their sum is not
    limited to the base.

    Args:
        commissionable_base_cents: Subtotal after discounts, shipping excluded
        resolved_affiliate_id: Affiliate credited by attribution, if any
        affiliate_links: Affiliates linked to the checkout with their terms
        partner_terms: Fixed partners of the checkout

    Returns:
        Tuple of ledger entries in payout order.
    """
    entries: list[CommissionLedgerEntry] = []

    link = find_affiliate_link(resolved_affiliate_id, affiliate_links)
    if link is not None:
        entries.append(
            _entry(PartyKind.AFFILIATE, link.affiliate_id, link.terms, commissionable_base_cents)
        )

    for kind, partner in partner_terms.configured():
        entries.append(
            _entry(kind, partner.party_id, partner.terms, commissionable_base_cents)
        )

    return tuple(entries)


def _entry(
    kind: PartyKind,
    party_id: str,
    terms: CommissionTerms,
    commissionable_base_cents: int,
) -> CommissionLedgerEntry:
    amount, capped = compute_commission_cents(commissionable_base_cents, terms)
    return CommissionLedgerEntry(
        party_kind=kind,
        party_id=party_id,
        commission_type=terms.commission_type,
        commission_value=terms.commission_value,
        computed_amount_cents=amount,
        capped=capped,
    )
