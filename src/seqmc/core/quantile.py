"""Inverse standard normal CDF (probit).

Uses Peter Acklam's rational approximation, which has a relative error
of about 1.15e-9 over the whole open interval (0, 1). The interval is split
into a central region and two tails; the tails are evaluated in terms of
sqrt(-2 log(min(p, 1 - p))) because the central rational function loses
accuracy there.
"""

import math

from seqmc.core.errors import InvalidArgumentError


# Central region numerator / denominator
_A = (
    -3.969683028665376e01,
    2.209460984245205e02,
    -2.759285104469687e02,
    1.383577518672690e02,
    -3.066479806614716e01,
    2.506628277459239e00,
)
_B = (
    -5.447609879822406e01,
    1.615858368580409e02,
    -1.556989798598866e02,
    6.680131188771972e01,
    -1.328068155288572e01,
)

# Tail numerator / denominator
_C = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
_D = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
)

P_LOW = 0.02425
P_HIGH = 1.0 - P_LOW


def _tail(q: float) -> float:
    """Lower-tail quantile for q = min(p, 1 - p) < P_LOW."""
    r = math.sqrt(-2.0 * math.log(q))
    num = ((((_C[0] * r + _C[1]) * r + _C[2]) * r + _C[3]) * r + _C[4]) * r + _C[5]
    den = (((_D[0] * r + _D[1]) * r + _D[2]) * r + _D[3]) * r + 1.0
    return num / den


def inverse_std_normal_cdf(p: float) -> float:
    """Return z such that the standard normal CDF at z equals p.

    Args:
        p: Probability, strictly between 0 and 1.

    Returns:
        The quantile z. Exactly 0.0 for p == 0.5.

    Raises:
        InvalidArgumentError: If p is not in the open interval (0, 1).
            The endpoints would map to infinite quantiles and are rejected,
            as is NaN.
    """
    if not 0.0 < p < 1.0:
        raise InvalidArgumentError(f"p must be in (0, 1), got {p}")

    if p < P_LOW:
        return _tail(p)
    if p > P_HIGH:
        return -_tail(1.0 - p)

    q = p - 0.5
    r = q * q
    num = (((((_A[0] * r + _A[1]) * r + _A[2]) * r + _A[3]) * r + _A[4]) * r + _A[5]) * q
    den = ((((_B[0] * r + _B[1]) * r + _B[2]) * r + _B[3]) * r + _B[4]) * r + 1.0
    return num / den


def two_sided_quantile(level: float) -> float:
    """Return the z-score for a two-sided interval at the given confidence level.

    Args:
        level: Confidence level in (0, 1), e.g. 0.95.

    Returns:
        inverse_std_normal_cdf(1 - (1 - level) / 2), e.g. ~1.959964 for 0.95.
    """
    if not 0.0 < level < 1.0:
        raise InvalidArgumentError(f"level must be in (0, 1), got {level}")
    alpha = 1.0 - level
    return inverse_std_normal_cdf(1.0 - alpha / 2.0)
