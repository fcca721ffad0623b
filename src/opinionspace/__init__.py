"""Opinion space projection: cluster summaries, 3-D layout and opinion bridges."""

from .project import project, project_simulation

__all__ = ["project", "project_simulation"]
__version__ = "0.1.0"
