"""pairmatch - memory-matching card game engine.

``pairmatch.core`` holds the pure board logic, ``pairmatch.game`` the
match coordinator and presenters, ``pairmatch.qt_bridge`` the Qt
event-loop integration.
"""

__version__ = "0.1.0"
