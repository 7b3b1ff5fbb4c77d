"""Workflow Engine.

Declare workflows as finite state machines, start instances of them and move
each instance along by executing actions.

- `workflow_engine.engine.workflow`: validator, transition engine, repositories
- `workflow_engine.server`: FastAPI adapter
- `workflow_engine.engine.main`: argparse CLI
"""

__version__ = "0.1.0"

from workflow_engine.engine.config import EngineSettings

__all__ = ["__version__", "EngineSettings"]
