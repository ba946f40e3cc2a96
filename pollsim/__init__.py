"""Simulated public-opinion polls generated by an LLM."""

__version__ = "1.0.0"
