"""
Per-decision search statistics for the Monte Carlo strategy.

A SearchScratch is created for one decision and thrown away afterwards;
nothing in it survives to the next turn.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence
import math


@dataclass
class CandidateStats:
    """
    Rollout statistics of one candidate column.
    """
    column: int
    visits: int = 0
    score_sum: float = 0.0

    @property
    def average(self) -> float:
        """Mean rollout reward (0 for an unvisited candidate)."""
        if self.visits == 0:
            return 0.0
        return self.score_sum / self.visits

    def ucb_score(self, total_visits: int, exploration_weight: float) -> float:
        """
        Calculate the UCB1 score.
        
        UCB1 = average_reward + exploration_weight * sqrt(ln(total_visits) / visits)
        
        Args:
            total_visits: Rollouts run across all candidates
            exploration_weight: Exploration constant
            
        Returns:
            UCB1 score (infinite for an unvisited candidate)
        """
        if self.visits == 0:
            return float("inf")
        exploration = math.sqrt(math.log(total_visits) / self.visits)
        return self.average + exploration_weight * exploration

    def confidence_score(self, confidence_visits: int, confidence_bonus: float) -> float:
        """
        Average reward scaled up by a factor growing with the visit count.

        score = average + average * confidence_bonus * min(visits / confidence_visits, 1)
        """
        if self.visits == 0:
            return float("-inf")
        confidence = min(self.visits / confidence_visits, 1.0)
        return self.average + confidence * confidence_bonus * self.average

    def update(self, reward: float) -> None:
        self.visits += 1
        self.score_sum += reward


class SearchScratch:
    """Candidate column -> CandidateStats for a single decision."""

    def __init__(self, columns: Sequence[int]):
        if not columns:
            raise ValueError("SearchScratch needs at least one candidate")
        self.stats: Dict[int, CandidateStats] = {
            column: CandidateStats(column) for column in columns
        }

    @property
    def columns(self) -> List[int]:
        return list(self.stats)

    @property
    def total_visits(self) -> int:
        return sum(entry.visits for entry in self.stats.values())

    def record(self, column: int, reward: float) -> None:
        """Add one rollout result to a candidate."""
        self.stats[column].update(reward)

    def unvisited(self) -> List[int]:
        return [column for column, entry in self.stats.items() if entry.visits == 0]

    def __getitem__(self, column: int) -> CandidateStats:
        return self.stats[column]

    def __iter__(self) -> Iterator[CandidateStats]:
        return iter(self.stats.values())

    def __len__(self) -> int:
        return len(self.stats)

    def to_dict(self) -> Dict[int, Dict[str, float]]:
        """Statistics of every candidate as plain dictionaries."""
        return {
            column: {
                "visits": entry.visits,
                "score_sum": entry.score_sum,
                "average": entry.average,
            }
            for column, entry in self.stats.items()
        }
