"""Event attendance tracker.

Feature modules (participants, attendance, sessions, ...) sit behind a thin
Flask controller layer; records live in a remote Airtable base.
"""
