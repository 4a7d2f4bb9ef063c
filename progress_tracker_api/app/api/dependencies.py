"""
FastAPI dependencies shared by the routers.
"""

from fastapi import Request

from ..services.task_service import TaskService


def get_task_service(request: Request) -> TaskService:
    """Resolve the task service through the application's service provider.

    ``create_app`` stores the provider and the ``AppContext`` on
    ``app.state``; the provider returns a cached instance when one is
    still valid.
    """
    state = request.app.state
    return state.service_provider.get_service(state.context, "task")
