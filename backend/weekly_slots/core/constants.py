"""
Calendar constants shared by resolution, capacity and the API.
"""

# Days in one resolved week; a week starts on Sunday (day_of_week 0).
DAYS_IN_WEEK = 7
SUNDAY = 0
SATURDAY = 6

# Capacity rule: active (resolved) slots allowed on a single date
MAX_SLOTS_PER_DAY = 2

# Only these fields may change when editing a single occurrence
EDITABLE_FIELDS = ("start_time", "end_time", "title", "description")

# First key of the per-weekday advisory lock taken while creating a template
CAPACITY_LOCK_NAMESPACE = 7001
