"""hactl: policy-gated Home Assistant control for tool-calling agents."""

__version__ = "0.1.0"
