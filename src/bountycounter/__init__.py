"""bountycounter: tail EVE Online game logs and keep running bounty totals per character."""

__version__ = "0.1.0"
