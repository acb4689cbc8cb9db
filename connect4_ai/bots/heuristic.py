"""
Weighted heuristic strategies.

All heuristic bots score a candidate column the same way: simulate the move,
measure it with analysis.evaluation.move_features and take a weighted sum
of the sub-scores. The named bots differ only in their StrategyWeights:

- offensive-mixed: offence weighted twice as heavily as defence
- defensive-mixed: defence weighted twice as heavily as offence
- defensive: no offence at all, heavy pattern disruption
- balanced: every term at weight 1
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

from connect4_ai.core.game import Game
from connect4_ai.analysis.evaluation import MoveFeatures, move_features, position_baseline
from connect4_ai.bots.base import BotStrategy


# Per-feature points before weighting
THREAT_POINTS = 5
TWO_POINTS = 2
THREE_POINTS = 4
BLOCK_POINTS = 3
THREE_DISRUPTED_POINTS = 3
TWO_DISRUPTED_POINTS = 1
LOOKAHEAD_POINTS = 100


@dataclass
class StrategyWeights:
    """
    Relative weights of the heuristic sub-scores.
    
    All weights must be non-negative; the look-ahead weight scales a
    penalty, so a larger value means more caution.
    """
    offensive: float = 1.0
    """Threats and 2-/3-in-a-row formations created for the mover"""

    defensive: float = 1.0
    """Reduction of the opponent's immediate winning moves"""

    pattern_disruption: float = 1.0
    """Reduction of the opponent's 2-/3-in-a-row formations"""

    center: float = 1.0
    """Centre column proximity"""

    key_position: float = 1.0
    """Denying the centre columns and the bottom rows"""

    restriction: float = 1.0
    """Reduction of the opponent's safe replies"""

    lookahead: float = 1.0
    """Penalty when the opponent's best reply forks or wins"""

    randomness: float = 0.2
    """Width of the uniform tie-break jitter"""

    def __post_init__(self):
        """Validate weights."""
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"{f.name} weight must be non-negative")

    @classmethod
    def balanced(cls) -> 'StrategyWeights':
        return cls()

    @classmethod
    def offensive_mixed(cls) -> 'StrategyWeights':
        return cls(
            offensive=2.0,
            defensive=1.0,
            pattern_disruption=0.5,
            center=1.5,
            key_position=0.5,
            restriction=0.5,
            lookahead=1.0,
            randomness=0.3,
        )

    @classmethod
    def defensive_mixed(cls) -> 'StrategyWeights':
        return cls(
            offensive=1.0,
            defensive=2.0,
            pattern_disruption=1.0,
            center=1.0,
            key_position=1.0,
            restriction=1.5,
            lookahead=1.0,
            randomness=0.2,
        )

    @classmethod
    def defensive_only(cls) -> 'StrategyWeights':
        return cls(
            offensive=0.0,
            defensive=3.0,
            pattern_disruption=4.0,
            center=1.0,
            key_position=1.5,
            restriction=1.0,
            lookahead=1.5,
            randomness=0.1,
        )

    @classmethod
    def from_dict(cls, weights: Dict[str, float]) -> 'StrategyWeights':
        """Create weights from a dictionary, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        valid = {k: v for k, v in weights.items() if k in names}
        return cls(**valid)

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def score_features(features: MoveFeatures, weights: StrategyWeights) -> float:
    """
    Weighted sum of a move's sub-scores, without the random jitter.

    Args:
        features: Measured candidate move
        weights: Weights to apply

    Returns:
        Score (higher is better)
    """
    offensive = (
        features.threats_created * THREAT_POINTS
        + features.twos_created * TWO_POINTS
        + features.threes_created * THREE_POINTS
    )
    defensive = features.threats_blocked * BLOCK_POINTS
    disruption = (
        features.threes_disrupted * THREE_DISRUPTED_POINTS
        + features.twos_disrupted * TWO_DISRUPTED_POINTS
    )

    return (
        offensive * weights.offensive
        + defensive * weights.defensive
        + disruption * weights.pattern_disruption
        + features.center * weights.center
        + features.key_position * weights.key_position
        + features.restriction * weights.restriction
        - features.lookahead_danger * LOOKAHEAD_POINTS * weights.lookahead
    )


class WeightedStrategy(BotStrategy):
    """
    Heuristic bot scoring every candidate with a weight vector.
    """

    name = "weighted"
    description = "Weighted heuristic evaluation"
    default_weights = StrategyWeights.balanced

    def __init__(
        self,
        weights: Optional[StrategyWeights] = None,
        random_seed: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Initialize the strategy.

        Args:
            weights: Weight vector (defaults to the class preset)
            random_seed: Seed for the tie-break jitter
            verbose: Whether to print move scores
        """
        super().__init__(random_seed=random_seed, verbose=verbose)
        self.weights = weights or type(self).default_weights()
        self.last_scores: Dict[int, float] = {}

    def evaluate_move(self, game: Game, column: int, baseline=None) -> float:
        """
        Score one candidate column, jitter included.

        Returns:
            Score, or -inf for a column that cannot be played
        """
        features = move_features(game, column, baseline)
        if features is None:
            return float("-inf")
        jitter = (self.rng.random() - 0.5) * self.weights.randomness
        return score_features(features, self.weights) + jitter

    def select_from_safe_columns(self, game: Game, candidate_columns: List[int]) -> int:
        candidates = self.candidates_or_valid(game, candidate_columns)
        if len(candidates) == 1:
            self.last_scores = {candidates[0]: 0.0}
            return candidates[0]

        baseline = position_baseline(game)
        scores = {column: self.evaluate_move(game, column, baseline) for column in candidates}
        self.last_scores = scores

        if self.verbose:
            ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
            print(f"{self.name} scores: " + ", ".join(f"{col}={score:.1f}" for col, score in ranked))

        return max(candidates, key=lambda column: scores[column])

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info.update({"type": "heuristic", "weights": self.weights.to_dict()})
        return info


class OffensiveMixedBot(WeightedStrategy):
    """Aggressive play with 2x offensive weighting."""
    name = "offensive-mixed"
    description = "2x offensive weighting for aggressive play"
    default_weights = StrategyWeights.offensive_mixed


class DefensiveMixedBot(WeightedStrategy):
    """Cautious play with 2x defensive weighting."""
    name = "defensive-mixed"
    description = "2x defensive weighting for cautious play"
    default_weights = StrategyWeights.defensive_mixed


class DefensiveBot(WeightedStrategy):
    """Pattern disruption and defensive positioning."""
    name = "defensive"
    description = "Pattern disruption and defensive positioning"
    default_weights = StrategyWeights.defensive_only


class BalancedBot(WeightedStrategy):
    name = "balanced"
    description = "Every heuristic term weighted equally"
    default_weights = StrategyWeights.balanced
