"""Starts/stops OpenTracks and Geo Tracker recording from activity transitions."""

__version__ = "0.1.0"
