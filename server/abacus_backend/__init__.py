"""
Backend package for the Matrix Abacus website.

This package provides a FastAPI application serving the reviews and contact
APIs, with a flat-file review store and SMTP notifications.
"""
