"""
Configuration for the Monte Carlo strategy.

This module defines the rollout budget, exploration constant and time limit
used by the Monte Carlo bot, with validation and a few presets.
"""
from dataclasses import dataclass, field, fields
from typing import Optional, Tuple, ClassVar

from connect4_ai.core.constants import (
    DEFAULT_SIMULATIONS, DEFAULT_MIN_SIMULATIONS, DEFAULT_TIME_LIMIT, DEFAULT_EXPLORATION,
    MAX_ROLLOUT_DEPTH
)


@dataclass
class MCTSConfig:
    """
    Configuration parameters for the Monte Carlo strategy.
    
    The number of rollouts per decision is ``simulations`` scaled by the
    game-phase and complexity multipliers and clamped to
    [min_simulations, 2 * simulations].
    """
    # Budget
    simulations: int = DEFAULT_SIMULATIONS
    """Base number of rollouts per decision"""
    
    min_simulations: int = DEFAULT_MIN_SIMULATIONS
    """Rollouts always run, even after the time limit has passed"""
    
    time_limit: Optional[float] = DEFAULT_TIME_LIMIT
    """Wall-clock budget in seconds (None = no limit)"""
    
    # Search parameters
    exploration_weight: float = DEFAULT_EXPLORATION
    """UCB1 exploration parameter"""
    
    max_depth: int = MAX_ROLLOUT_DEPTH
    """Maximum number of random moves in one rollout"""
    
    # Final choice
    confidence_visits: int = 50
    """Visit count at which the confidence bonus is fully earned"""
    
    confidence_bonus: float = 0.1
    """Fraction of the average added for a fully visited candidate"""
    
    # Budget shaping
    phase_multipliers: Tuple[Tuple[float, float], ...] = field(default_factory=lambda: (
        (0.15, 0.8),  # Opening: simple patterns
        (0.40, 1.2),  # Early mid-game
        (0.70, 1.8),  # Critical mid-game
        (0.85, 1.5),  # Late game
        (1.00, 1.0),  # Endgame: few options left
    ))
    """(board fill upper bound, multiplier) pairs in increasing order"""
    
    complexity_divisor: float = 4.0
    """Legal column count that gives a complexity multiplier of 1"""
    
    max_complexity: float = 1.5
    """Upper bound of the complexity multiplier"""
    
    random_seed: Optional[int] = None
    """Seed for reproducible searches (None = nondeterministic)"""
    
    # Constants
    WIN_REWARD: ClassVar[float] = 1.0
    LOSS_REWARD: ClassVar[float] = -1.0
    DRAW_REWARD: ClassVar[float] = 0.0
    
    def __post_init__(self):
        """Validate configuration parameters."""
        if self.simulations <= 0:
            raise ValueError("simulations must be positive")
        
        if self.min_simulations <= 0:
            raise ValueError("min_simulations must be positive")
        
        if self.min_simulations > 2 * self.simulations:
            raise ValueError("min_simulations must not exceed 2 * simulations")
        
        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive or None")
        
        if self.exploration_weight <= 0:
            raise ValueError("exploration_weight must be positive")
        
        if self.max_depth <= 0:
            raise ValueError("max_depth must be positive")
        
        if self.confidence_visits <= 0:
            raise ValueError("confidence_visits must be positive")
        
        if self.confidence_bonus < 0:
            raise ValueError("confidence_bonus must be non-negative")
        
        if self.complexity_divisor <= 0 or self.max_complexity <= 0:
            raise ValueError("complexity_divisor and max_complexity must be positive")
        
        self.phase_multipliers = tuple(tuple(pair) for pair in self.phase_multipliers)
        bounds = [bound for bound, _ in self.phase_multipliers]
        if not bounds or bounds != sorted(bounds) or bounds[-1] < 1.0:
            raise ValueError("phase_multipliers must be sorted and end at 1.0")
    
    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.
        
        Returns:
            Default MCTSConfig object
        """
        return cls()
    
    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer rollouts).
        
        Returns:
            Fast MCTSConfig object
        """
        return cls(
            simulations=200,
            min_simulations=50,
            time_limit=0.5,
        )
    
    @classmethod
    def strong(cls) -> 'MCTSConfig':
        """
        Get a configuration for stronger play (more rollouts, more time).
        
        Returns:
            Strong MCTSConfig object
        """
        return cls(
            simulations=3000,
            min_simulations=500,
            time_limit=5.0,
            exploration_weight=1.2,  # Slightly less exploration
        )
    
    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.
        
        Args:
            config_dict: Dictionary of configuration parameters
            
        Returns:
            MCTSConfig object
        """
        names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in names}
        return cls(**valid_params)
    
    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.
        
        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}
    
    def __str__(self) -> str:
        params = ", ".join(f"{name}={value}" for name, value in self.to_dict().items())
        return f"MCTSConfig({params})"
