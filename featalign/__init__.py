"""featalign: aligned bases of features between query and target."""

__version__ = "0.1.0"
