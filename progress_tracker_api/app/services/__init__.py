"""
Service layer abstraction.

Services sit between route handlers and repositories so API handlers
are not coupled to the storage driver.  ``provider`` resolves services
by name for the route layer.
"""
