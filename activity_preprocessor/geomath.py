"""Geodesic distance on the WGS-84 ellipsoid.

Distances between consecutive GPS fixes are computed with Vincenty's inverse
formula, which is accurate to well under a millimeter for the short segments
found in activity recordings. The iteration does not converge for nearly
antipodal points; in that case the last estimate is returned, since a
slightly wrong segment length is preferable to losing the sample.
"""

from __future__ import annotations

import logging
import math

logger = logging.getLogger(__name__)

WGS84_SEMI_MAJOR_AXIS_M = 6_378_137.0
WGS84_FLATTENING = 1 / 298.257223563
WGS84_SEMI_MINOR_AXIS_M = (1 - WGS84_FLATTENING) * WGS84_SEMI_MAJOR_AXIS_M

VINCENTY_TOLERANCE = 1e-12
VINCENTY_MAX_ITERATIONS = 200


def vincenty_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the ellipsoidal surface distance in meters between two points.

    Parameters
    ----------
    lat1, lon1:
        First coordinate in degrees.
    lat2, lon2:
        Second coordinate in degrees.

    Returns
    -------
    float
        Distance in meters. Coincident points yield ``0.0``.
    """

    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    a = WGS84_SEMI_MAJOR_AXIS_M
    b = WGS84_SEMI_MINOR_AXIS_M
    f = WGS84_FLATTENING

    # Reduced latitudes on the auxiliary sphere.
    u1 = math.atan((1 - f) * math.tan(math.radians(lat1)))
    u2 = math.atan((1 - f) * math.tan(math.radians(lat2)))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
    sin_u2, cos_u2 = math.sin(u2), math.cos(u2)

    big_l = math.radians(lon2 - lon1)
    lam = big_l

    sin_sigma = cos_sigma = sigma = 0.0
    cos_sq_alpha = cos_2sigma_m = 0.0
    converged = False

    for _ in range(VINCENTY_MAX_ITERATIONS):
        sin_lam, cos_lam = math.sin(lam), math.cos(lam)
        sin_sigma = math.hypot(
            cos_u2 * sin_lam, cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam
        )
        if sin_sigma == 0:
            return 0.0

        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1 - sin_alpha**2
        # Both points on the equator.
        if cos_sq_alpha == 0:
            cos_2sigma_m = 0.0
        else:
            cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha

        c = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
        lam_prev = lam
        lam = big_l + (1 - c) * f * sin_alpha * (
            sigma
            + c * sin_sigma * (cos_2sigma_m + c * cos_sigma * (-1 + 2 * cos_2sigma_m**2))
        )
        if abs(lam - lam_prev) < VINCENTY_TOLERANCE:
            converged = True
            break

    if not converged:
        logger.debug(
            "Vincenty did not converge for (%s, %s) -> (%s, %s); using last estimate",
            lat1,
            lon1,
            lat2,
            lon2,
        )

    u_sq = cos_sq_alpha * (a**2 - b**2) / b**2
    big_a = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    big_b = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = (
        big_b
        * sin_sigma
        * (
            cos_2sigma_m
            + big_b
            / 4
            * (
                cos_sigma * (-1 + 2 * cos_2sigma_m**2)
                - big_b
                / 6
                * cos_2sigma_m
                * (-3 + 4 * sin_sigma**2)
                * (-3 + 4 * cos_2sigma_m**2)
            )
        )
    )

    return b * big_a * (sigma - delta_sigma)
