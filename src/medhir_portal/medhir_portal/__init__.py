"""Medhir portal session core.

Organized by feature modules (storage, session, leads) with a thin Flask
controller layer on top of plain service objects.
"""
