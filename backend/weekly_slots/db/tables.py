"""
Single source of truth for database tables that exist after migrations.

Templates and exceptions share the one `slots` table.
"""
# All tables that exist in the DB. Must match models and migrations.
ALL_TABLE_NAMES = ("slots",)
