"""
Completion of a deal in which one hand is left implicit.

Notations such as LIN's md node or a PBN Deal tag with a "-" hand carry only
three hands; the fourth is whatever remains of the 52-card deck.
"""
from typing import Set
from common_objects import Card, Deal, Direction, Hand


def infer_fourth_hand(deal: Deal, implicit: Direction) -> Hand:
    """
    Compute the hand of the implicit direction as the deck minus the cards of the other three hands.

    The result is only a complete 13-card hand when the three supplied hands are
    pairwise disjoint and hold 39 cards between them. That is the caller's
    responsibility; overlapping or short hands yield a fourth hand of the wrong size.
    :param deal: Deal holding up to three populated hands
    :param implicit: Direction whose hand is computed; its current hand is ignored
    :return: A new Hand in canonical card order
    """
    seen: Set[Card] = set()
    for direction in Direction:
        if direction != implicit:
            seen.update(deal.hand(direction))
    return Hand(card for card in Card.all() if card not in seen)


def complete_deal(deal: Deal, implicit: Direction) -> Deal:
    deal.set_hand(implicit, infer_fourth_hand(deal, implicit))
    return deal
