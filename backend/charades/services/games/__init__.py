"""Game domain services: lifecycle, turns, word pools, scoring and rotation.

This package contains the game mechanics imported by the HTTP routes,
keeping transport concerns separated from the turn state machine.
"""
