"""
Focus score

Maps beta band power to a bounded 0-100 focus score by clamped linear scaling.
"""

import math

from ..core.config import MIN_BETA, MAX_BETA
from ..core.exceptions import ConfigurationError


class FocusNormalizer:
    """Clamped linear mapping of beta power onto [0, 100]"""

    def __init__(self, min_beta: float = MIN_BETA, max_beta: float = MAX_BETA):
        if max_beta <= min_beta:
            raise ConfigurationError(f"max_beta ({max_beta}) must be greater than min_beta ({min_beta})")
        self.min_beta = min_beta
        self.max_beta = max_beta

    def score(self, beta_power: float) -> float:
        """
        Compute the focus score

        Args:
            beta_power: Beta band power

        Returns:
            float: Score in [0, 100], one decimal. NaN and negative input
            score 0.
        """
        beta_power = float(beta_power)
        if math.isnan(beta_power) or beta_power < 0:
            return 0.0

        clamped = min(max(beta_power, self.min_beta), self.max_beta)
        scaled = (clamped - self.min_beta) / (self.max_beta - self.min_beta) * 100
        return round(scaled, 1)


def focus_score(beta_power: float, min_beta: float = MIN_BETA, max_beta: float = MAX_BETA) -> float:
    """Focus score of a beta power with the given (default) bounds"""
    return FocusNormalizer(min_beta, max_beta).score(beta_power)
