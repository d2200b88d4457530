"""cutrel: cut a changesets release, tag it, push it and publish release notes."""

__version__ = "0.1.0"
