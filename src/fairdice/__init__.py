"""fairdice — provably-fair commit-reveal value exchange and dice game."""

__version__ = "0.1.0"
