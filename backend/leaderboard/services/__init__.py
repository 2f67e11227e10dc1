"""Leaderboard domain services: authentication, score integrity, achievements.

HTTP blueprints import from here, keeping transport concerns separated
from the token protocol and the score rules.
"""
