"""NRPE checks shipped with nrpecheck."""
