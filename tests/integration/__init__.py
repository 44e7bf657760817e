"""
Integration tests for fallback-core.

Exercise the engine end-to-end with real asyncio timing:
- Concurrent start and first-success settlement
- Sequential ordering guarantees
- Backoff and retry-after waits
- External timeouts around collect-all
"""
