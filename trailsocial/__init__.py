"""Account and social-graph core for the trailsocial fitness backend."""

__version__ = "0.1.0"
