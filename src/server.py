"""Protean Engine runner for the commerce domain.

Starts Engine workers that process events asynchronously when the domain is
configured with `event_processing = "async"` (the production overlay):
- OutboxProcessor: polls the outbox, publishes events to the broker
- StreamSubscriptions: reads the broker, invokes event handlers
  (rating recomputation, order notifications)

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import asyncio

from protean.server.engine import Engine


def build_engine():
    from commerce.domain import commerce

    commerce.init()
    return Engine(commerce)


async def run():
    await build_engine().run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
