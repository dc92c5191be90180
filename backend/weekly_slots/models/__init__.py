from weekly_slots.models.slot import Slot

__all__ = ["Slot"]
