from mindspace.scheduling.slots import generate_slots
from mindspace.scheduling.availability import available_slots, weekday_name
from mindspace.scheduling.overlap import has_slot_conflict, has_interval_overlap, intervals_overlap

__all__ = [
    "generate_slots",
    "available_slots",
    "weekday_name",
    "has_slot_conflict",
    "has_interval_overlap",
    "intervals_overlap",
]
