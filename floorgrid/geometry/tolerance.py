from __future__ import annotations

# Positional epsilon for near-zero distance/length checks.
EPS_POS = 1e-12

# Minimum segment/ridge length in grid units for any computation dividing by length.
EPS_SEGMENT = 0.1

# Overlap tolerance in wall-local grid units; touching spans do not collide.
EPS_OVERLAP = 1e-6

# Coordinate equality tolerance for snapped grid points.
EPS_SNAP = 1e-9
