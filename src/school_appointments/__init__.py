"""School appointment booking package.

Feature modules (users, booking, appointments, maintenance) sit on top of a
small backend contract (row gateway, auth, change feed) with a thin Flask
controller layer. Tables and sync hold the reusable client-side engines.
"""
