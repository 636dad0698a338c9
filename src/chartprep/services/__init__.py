"""Service layer: reshape entry points, placement, statistics and post-processing."""
