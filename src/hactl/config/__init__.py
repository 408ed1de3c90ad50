"""Configuration: policy model, settings sources, and logging setup."""
