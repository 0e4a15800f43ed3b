# -*- coding: utf-8 -*-
"""Numeric tolerances and search limits."""

import math

# Cross products below this are treated as collinear. Solved joints sit
# exactly on crossing boundaries, so this cannot be zero.
ORIENTATION_EPS = 1e-10

# Slack on the reachability test and on the tangency height of two circles.
TANGENT_EPS = 1e-9

# Determinant below which two lines are parallel.
PARALLEL_EPS = 1e-10

# A link shorter than this has no defined rotation.
MIN_LINK_LENGTH = 1.0

# Range finder
RANGE_MAX_ITERATIONS = 100
RANGE_PRECISION = 1e-4
RANGE_SPAN_LOCKED = 2.0 * math.pi
RANGE_SPAN_UNLOCKED = 4.0 * math.pi
# Largest angle step when checking that an accepted offset is reachable from
# the previous one without passing an unreachable gap.
RANGE_PATH_STEP = 0.02

# Slider clamping (percent units)
CLAMP_MAX_ITERATIONS = 25
CLAMP_PRECISION = 0.01

# Three-position synthesis
BISECTOR_EXTENSION = 1000.0
SYNTHESIS_TOLERANCE = 0.1

# Default placement of the box in design space (top-left of the closed lid).
DEFAULT_ORIGIN = (0.0, 400.0)
