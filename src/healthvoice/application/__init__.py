"""
Application layer: ports, use cases and the session/doctor controllers.
"""
