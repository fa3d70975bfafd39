"""
Quadrilateral CLI - command-line interface for the shape engine.

Classifies four points, replays scripted sessions against a local engine,
and talks to a running device bridge over MQTT.

Usage:
    quadrilateral-cli classify 0 0 2 0 2 1 0 1
    quadrilateral-cli simulate config/square_to_rectangle.yaml
    quadrilateral-cli send-sample --vertex C --delta 0.05 0
    quadrilateral-cli watch
"""

__version__ = "1.0.0"
