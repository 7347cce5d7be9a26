"""shiftleft - run a CI pipeline locally with container parity."""

__version__ = "0.1.0"
