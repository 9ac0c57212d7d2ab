"""
Reservation approval portal.

Drives room and auditorium reservations for student organizations through
review (approve / reject / cancel) and keeps the approved reservation, its
derived calendar event and the bound room consistent without relying on
multi-entity transactions.
"""

__version__ = "1.0.0"
