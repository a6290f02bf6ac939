"""
Fairway lane graph preprocessing.

Turns raw fairway centerline polylines into a routable planar graph by
decomposing them into x-monotone chains and sweeping the chains for
pairwise crossings.
"""

__version__ = "0.1.0"
