# -*- coding: utf-8 -*-
"""Exceptions and solver failure reasons.

Only malformed input and unrecoverable geometry raise. Angles the hinge cannot
reach are ordinary results and are reported as a :class:`FailureReason`.
"""

from __future__ import annotations

from enum import Enum


class HingeError(ValueError):
    """Base class for hinge errors."""


class InvalidGeometry(HingeError):
    """Malformed point data, missing pivots or a wrong number of poses."""


class DegenerateLinkage(HingeError):
    """A link collapsed below the minimal length; the pivots must be re-anchored."""


class SynthesisDegenerate(HingeError):
    """Perpendicular bisectors are parallel (collinear coupler positions)."""


class FailureReason(str, Enum):
    DEGENERATE_LINKAGE = "degenerate_linkage"
    UNREACHABLE = "unreachable"
    CONFIGURATION_INVALID = "configuration_invalid"
