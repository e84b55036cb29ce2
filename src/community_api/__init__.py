"""Community admin API: tech stacks, chapters, members and bulk imports."""

__version__ = "0.1.0"
