"""
arraybench
==========
Measures how the length of an embedded array affects MongoDB document size,
insert latency and read-back latency.

Pipeline per swept size N:
  Sweep: Fibonacci sizes up to a ceiling
  Synthesize: document with N nested objects
  Round trip: serialize -> insert -> timed read-back -> report
"""

__version__ = "1.0.0"
