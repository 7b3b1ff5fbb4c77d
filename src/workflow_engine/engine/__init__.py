"""Workflow engine components.

Provides:
- Settings loaded from .env
- Structured logging
- The workflow state machine (`workflow_engine.engine.workflow`)
- A small CLI surface
"""
