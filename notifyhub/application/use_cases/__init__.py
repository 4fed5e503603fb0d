"""Use cases grouped by aggregate: notifications, preferences and templates."""
