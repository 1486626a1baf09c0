"""
Note editor boundary for Notea.

Design intent:
- Model the single-page editor as messages folded into an immutable model.
- Return effects as plain values; never perform I/O from the update step.
- Render the model through a pure declarative view.
"""
