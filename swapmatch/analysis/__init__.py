from swapmatch.analysis.compatibility import (
    compatibility_score,
    compute_potential_matches,
    count_possible_trades,
    evaluate_candidate,
    max_simultaneous_trades,
    obtainable_cards,
    propose_trades,
    rank_candidates,
    trade_pairs,
)

__all__ = [
    "compatibility_score",
    "compute_potential_matches",
    "count_possible_trades",
    "evaluate_candidate",
    "max_simultaneous_trades",
    "obtainable_cards",
    "propose_trades",
    "rank_candidates",
    "trade_pairs",
]
