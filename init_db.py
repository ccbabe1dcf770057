#!/usr/bin/env python
"""
Database initialization script
Creates tables and, optionally, the default sources for a demo user
"""
import sys

from opportunityhub import create_app, db
from opportunityhub.collection.pipeline import ensure_default_sources

app = create_app()

with app.app_context():
    print("Initializing database...")

    # Create tables
    db.create_all()

    if len(sys.argv) > 1:
        user_id = sys.argv[1]
        created = ensure_default_sources(user_id)
        if created:
            print(f"Created {created} default sources for '{user_id}'")
        else:
            print(f"User '{user_id}' already has sources")

    print("\nDatabase initialization complete!")
