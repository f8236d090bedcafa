"""Notifications app package.

Email and in-app notifications for hall booking confirmations and
status changes. Delivery runs in Celery tasks and never blocks a booking.
"""
