"""
Brenner engine.

Epistemic lifecycle core for the BrennerBot research workflow: the assumption
state machine, falsification propagation, the append-only audit history and
the heuristic hypothesis-set classifiers.
"""

__version__ = "0.1.0"
