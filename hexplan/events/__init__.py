"""
Events module - dziennik operacji planowania w formacie JSON.

Zawiera:
- PlanningEvent: Dataclass reprezentująca operację
- EventType: Enum typów operacji
- EventLogger: Dziennik sesji
"""

from .event_logger import PlanningEvent, EventType, EventLogger

__all__ = ["PlanningEvent", "EventType", "EventLogger"]
