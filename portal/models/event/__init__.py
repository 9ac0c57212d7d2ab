from portal.models.event.event import Event

__all__ = ["Event"]
