"""Data layer package: SQLite connection, schema, migrations and repos.
The store stands in for the hosted document database; every repo returns
plain dicts so the core never sees sqlite rows.
"""
