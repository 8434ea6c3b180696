"""
Domain layer: entities, value objects, enums, events and business errors.
"""
