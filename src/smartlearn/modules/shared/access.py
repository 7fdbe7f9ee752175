"""
Ownership checks shared by the task and submission workflows.
"""

from uuid import UUID


def is_owner(entity_creator_id: str | UUID | None, caller_id: str | UUID | None) -> bool:
    """
    Return True when the caller is the creator of the entity.

    IDs are compared as strings so UUID objects and their string form match.
    A missing creator or caller never owns anything.
    """
    if entity_creator_id is None or caller_id is None:
        return False
    return str(entity_creator_id) == str(caller_id)
