"""
API orchestration boundary for Notea.

Design intent:
- Expose thin, typed endpoints for editor sessions and their messages.
- Keep request validation explicit and failure modes predictable.
- Orchestrate the editor runtime without embedding editor logic in routes.
"""
