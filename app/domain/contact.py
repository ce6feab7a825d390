"""Professional contacts: upcoming follow-ups"""
from datetime import date
from typing import Iterable


def upcoming_contacts(contacts: Iterable, today: date) -> list:
    """Contacts with next_contact >= today (inclusive), soonest first."""
    upcoming = [c for c in contacts if c.next_contact is not None and c.next_contact >= today]
    return sorted(upcoming, key=lambda c: c.next_contact)


def industries(contacts: Iterable) -> list[str]:
    return sorted({c.industry for c in contacts if c.industry})
