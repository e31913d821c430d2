from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    # Points per lock event, indexed by rows cleared (0..4)
    line_clear_scores: tuple[int, int, int, int, int] = (0, 40, 100, 300, 1200)
    speed_up_every: int = 1000

    def score_for_lines(self, lines: int) -> int:
        if not 0 <= lines < len(self.line_clear_scores):
            raise ValueError(f"cannot score {lines} cleared rows")
        return self.line_clear_scores[lines]

    def should_speed_up(self, score: int) -> bool:
        """True when ``score`` rests on a nonzero multiple of the ramp threshold.

        Only the current total is checked: an award that skips past several
        thresholds counts once, and every later update that leaves the score
        on a threshold, 0-point locks included, counts again.
        """
        return score > 0 and score % self.speed_up_every == 0
