"""
SignInCommand.

Command to open a back-office session.
"""
from dataclasses import dataclass


@dataclass
class SignInCommand:
    """Command to sign an admin in with email and password."""

    email: str
    password: str
