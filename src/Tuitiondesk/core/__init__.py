"""Scheduling and billing logic. Nothing here touches the store; callers pass
in the records and settings they fetched."""
