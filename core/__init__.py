"""Core application for the hospital backend.

This package contains the models, stores, services, views and route
registrations behind the inventory, billing and patient API.
"""
