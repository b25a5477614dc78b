"""Infrastructure layer — database, repositories, graph engine.

This layer depends on stdlib and third-party libs (SQLAlchemy, NetworkX).
It must never import from services, commands, or output.
"""
