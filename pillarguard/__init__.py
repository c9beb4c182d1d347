"""Game logic for a tower-defence shooter: guard the pillar against waves of monsters."""

__version__ = "0.1.0"