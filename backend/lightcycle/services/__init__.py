"""Game domain services: registry, match simulation, session state machine
and the tick scheduler.

Pure(ish) domain logic imported by the socket handlers and HTTP routes,
keeping transport concerns separated from core game mechanics.
"""
