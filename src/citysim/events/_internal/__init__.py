"""Equation functions behind the tick events."""
