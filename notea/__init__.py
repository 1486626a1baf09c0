"""
Notea note editor package.

Design intent:
- Keep the editor state machine pure and independent from transport.
- Reach persistence and downloads only through explicit ports.
"""
