"""Finances app: Yoco checkout sessions, payment records and webhooks."""
