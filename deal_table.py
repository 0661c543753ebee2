import logging
import polars as pl
from pathlib import Path
from typing import List, Dict, Any, Sequence
from common_objects import Board, Direction, Hand, Rank, DISPLAY_SUITS, HCP_values

def analyze_hand(hand: Hand) -> Dict[str, Any]:
    """
    Analyze a bridge hand.

    Args:
        hand: The hand to analyze

    Returns:
        Dictionary containing hand analysis
    """
    Suit_lengths: List[int] = [hand.suit_length(suit) for suit in DISPLAY_SUITS]
    suit_HCP: List[int] = []
    controls = 0

    for suit in DISPLAY_SUITS:
        suit_pts: int = 0
        for card in hand.cards_in_suit(suit):
            suit_pts += HCP_values.get(card.rank, 0)
            if card.rank == Rank.ACE:
                controls += 2
            elif card.rank == Rank.KING:
                controls += 1
        suit_HCP.append(suit_pts)

    # Calculate shape (lengths sorted in descending order)
    shape = sorted(Suit_lengths, reverse=True)

    return {
        'Length_S': Suit_lengths[0],
        'Length_H': Suit_lengths[1],
        'Length_D': Suit_lengths[2],
        'Length_C': Suit_lengths[3],
        'HCP_S': suit_HCP[0],
        'HCP_H': suit_HCP[1],
        'HCP_D': suit_HCP[2],
        'HCP_C': suit_HCP[3],
        'Total_HCP': sum(suit_HCP),
        'Controls': controls,
        'Pattern': '-'.join(str(x) for x in Suit_lengths),
        'Shape': '.'.join(str(x) for x in shape)
    }

def board_to_row(board: Board) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "DealNum": board.number,
        "Dealer": board.dealer.abbreviation() if board.dealer is not None else "",
        "Vulnerability": board.vulnerable.to_pbn(),
        "Hands": board.deal.to_pbn(),
        "Complete": board.deal.is_complete(),
    }
    for direction in Direction:
        prefix: str = direction.abbreviation()
        hand: Hand = board.deal.hand(direction)
        row[f"{prefix}_Hand"] = hand.to_pbn()
        # Add direction prefix to each feature
        for key, value in analyze_hand(hand).items():
            row[f"{prefix}_{key}"] = value
    return row

def boards_to_dataframe(boards: Sequence[Board]) -> pl.DataFrame:
    """One row per board with the deal in PBN form and per-hand features"""
    if not boards:
        return pl.DataFrame()
    return pl.from_dicts([board_to_row(board) for board in boards], infer_schema_length=None)

def write_deal_csv(boards: Sequence[Board], file_path: Path) -> None:
    df: pl.DataFrame = boards_to_dataframe(boards)
    if len(df) > 0:
        df.write_csv(file_path)
        logging.warning(f"Wrote {file_path.name}")
