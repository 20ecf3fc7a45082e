from dataclasses import dataclass
from math import sqrt
import logging

from scipy.stats import norm

# p-values below this print as "< 1e-10"
P_VALUE_FLOOR = 1e-10


@dataclass
class ZTestResult:
    z: float
    p_value: float

    def significant(self, alpha: float = 0.05) -> bool:
        return self.p_value < alpha

    @property
    def p_value_text(self) -> str:
        return f"< {P_VALUE_FLOOR:g}" if self.p_value < P_VALUE_FLOOR else f"{self.p_value:.4f}"


def two_proportion_z_test(x1: int, n1: int, x2: int, n2: int) -> ZTestResult:
    """Pooled two-sided Z-test for the difference between proportions x1/n1 and x2/n2"""
    logger = logging.getLogger("stats.py")
    if n1 <= 0 or n2 <= 0:
        raise ValueError(f"Sample sizes must be positive, got {n1=} and {n2=}")
    p1 = x1 / n1
    p2 = x2 / n2
    p = (x1 + x2) / (n1 + n2)
    se = sqrt(p * (1.0 - p) * (1.0 / n1 + 1.0 / n2))
    if se == 0.0:
        raise ValueError("Standard error is zero, cannot perform Z-Test.")
    z = (p1 - p2) / se
    p_value = max(0.0, 2.0 * norm.sf(abs(z)))
    logger.info(f"{x1=} {n1=} {x2=} {n2=} {z=:.4f} {p_value=}")
    return ZTestResult(z=z, p_value=p_value)
