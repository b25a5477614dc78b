"""SQLite persistence: schema and async engine setup."""
