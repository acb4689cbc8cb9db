"""
Position analysis: threat detection and move evaluation.

ThreatAnalyzer answers the questions the move pipeline and the hint system
ask every turn (which columns win, which must be blocked, which are safe).
The evaluation module holds the 4-cell window scan and the per-move features
the heuristic bots score.
"""

from connect4_ai.analysis.threats import (
    ThreatAnalyzer, ThreatAnalysisResult,
    AssistanceSettings, Hint, HintKind
)
from connect4_ai.analysis.evaluation import (
    count_formations, formation_profile,
    winning_columns, count_threats, allows_immediate_loss,
    MoveFeatures, move_features,
    rank_by_threats, rank_least_bad
)

__all__ = [
    'ThreatAnalyzer', 'ThreatAnalysisResult',
    'AssistanceSettings', 'Hint', 'HintKind',
    'count_formations', 'formation_profile',
    'winning_columns', 'count_threats', 'allows_immediate_loss',
    'MoveFeatures', 'move_features',
    'rank_by_threats', 'rank_least_bad'
]
