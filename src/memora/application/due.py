"""Selection of due cards and card-list filtering."""

from collections.abc import Iterable

from memora.domain.models import Flashcard


def is_due(card: Flashcard, now: int) -> bool:
    return card.next_review is None or card.next_review <= now


def select_due(
    cards: Iterable[Flashcard], now: int, deck_id: str | None = None
) -> list[Flashcard]:
    """
    Return the cards eligible for review at `now`, in input order.

    A card is due when it was never scheduled or its next_review has passed.
    If deck_id is given, only cards of that deck are returned.
    """
    return [
        card
        for card in cards
        if is_due(card, now) and (deck_id is None or card.deck_id == deck_id)
    ]


def filter_cards(
    cards: Iterable[Flashcard],
    deck_id: str | None = None,
    search: str | None = None,
    tags: list[str] | None = None,
) -> list[Flashcard]:
    """
    Narrow a card list for browsing.

    Args:
        deck_id: Keep only cards of this deck.
        search: Case-insensitive substring of the front or back. Blank is ignored.
        tags: Keep cards carrying at least one of these tags.
    """
    result = list(cards)

    if deck_id is not None:
        result = [c for c in result if c.deck_id == deck_id]

    if search and search.strip():
        term = search.lower()
        result = [c for c in result if term in c.front.lower() or term in c.back.lower()]

    if tags:
        wanted = set(tags)
        result = [c for c in result if wanted.intersection(c.tags)]

    return result
