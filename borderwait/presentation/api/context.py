"""
Shared application context for the API routes.
"""
from typing import Optional
from fastapi import HTTPException
from ...builder import AppContext

# Singleton
_context: Optional[AppContext] = None

def init_context(context: AppContext):
    global _context
    _context = context

def get_context() -> AppContext:
    if _context is None:
        raise HTTPException(500, "Application context not initialized")
    return _context
