"""
Application package.

The API is organised in layers: ``api`` (HTTP routes), ``services``
(orchestration and the service provider), ``repositories`` (MongoDB
persistence), ``schemas`` (pydantic models), ``middleware`` (request
logging) and ``core`` (configuration, logging, database and errors).
``main.create_app`` wires them together.
"""
