"""nrpecheck - NRPE health checks for conntrackd and named."""

__version__ = "0.1.0"
