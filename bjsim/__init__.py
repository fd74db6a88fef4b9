"""Automated blackjack table simulator."""

__version__ = "0.1.0"
