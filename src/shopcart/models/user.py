from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """Authenticated user as supplied by the auth collaborator"""
    id: str
    name: str
    email: str
