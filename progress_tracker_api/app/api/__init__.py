"""
HTTP layer.

``router`` aggregates the routers defined in ``endpoints``; route
handlers translate service results and failures into HTTP responses.
"""
