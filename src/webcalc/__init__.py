"""
WebCalc - Server-rendered calculator service

Keeps per-user calculator state across HTTP requests and turns button
presses into display text, an accumulated expression, and a numeric result.
"""

__version__ = "1.0.0"
__author__ = "WebCalc Team"
