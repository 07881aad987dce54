"""
FastAPI Dependencies for the Awareness Engine API.
"""

from fastapi import Request

from awareness.services.coach import ConsciousnessCoach


async def get_coach(request: Request) -> ConsciousnessCoach:
    """
    Dependency returning the app's coach.

    The coach is created once in create_app() and kept on app.state;
    tests swap it via app.dependency_overrides.
    """
    return request.app.state.coach
