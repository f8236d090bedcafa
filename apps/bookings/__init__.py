"""Hall bookings app.

Multi-step booking form for the café's function hall: draft persistence,
step validation, payment handoff and confirmation.
"""
