"""Gameplay core for a 2D side-scrolling action game: collision, movement physics, timing, input replay and rewind."""

__version__ = "0.1.0"
__all__ = [
    "component",
    "shapes",
    "colliders",
    "collision",
    "collision_manager",
    "time_manager",
    "input_manager",
    "rewind",
    "movement",
]