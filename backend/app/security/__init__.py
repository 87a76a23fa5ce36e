"""
Samanvi Backend — Request Authentication

Gate objects that create_app() attaches to route groups; see gates.py.
"""

from app.security.gates import ApiKeyGate, BasicAuthGate, OpenGate, build_gate

__all__ = ["ApiKeyGate", "BasicAuthGate", "OpenGate", "build_gate"]
