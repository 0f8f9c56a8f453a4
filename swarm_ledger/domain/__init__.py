"""Domain layer (pure logic).

- Keep economic rules and combat calculations here.
- Avoid I/O: no DB sessions, no HTTP/FastAPI.
- Randomness is passed in as a ``numpy.random.Generator`` argument.
"""
