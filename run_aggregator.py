#!/usr/bin/env python3
"""Poll order books from the enabled exchanges and log the top of book."""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from src.aggregator.config import AggregatorConfig
from src.aggregator.enums import Exchange
from src.aggregator.errors import AggregatorError
from src.aggregator.model.pair import CurrencyPair
from src.aggregator.service import PollingService, create_adapter

logger = logging.getLogger("aggregator")


async def main(pair_codes: list[str]) -> None:
    config = AggregatorConfig.from_env()
    config.configure_logging()
    wanted = [CurrencyPair.parse(code) for code in pair_codes]

    service = PollingService(config.polling)
    for exchange in Exchange:
        if not config.credentials(exchange).enabled:
            continue
        adapter = create_adapter(exchange, config)
        try:
            known = set(await asyncio.to_thread(adapter.load_markets))
        except AggregatorError as e:
            logger.error(f"{exchange.value}: failed to load markets: {e}")
            continue
        pairs = [p for p in wanted if p in known]
        if pairs:
            service.add(adapter, pairs, poll_account=adapter.transport.has_credentials)

    service.start()
    try:
        while True:
            await asyncio.sleep(config.polling.interval_seconds)
            for name, poller in service.pollers.items():
                for pair in poller.pairs:
                    if (pair, config.polling.market_type) not in poller.adapter.store:
                        continue
                    book = poller.adapter.store.get(pair, config.polling.market_type)
                    logger.info(f"{name} {pair}: bid {book.best_bid} ask {book.best_ask}")
    finally:
        await service.stop()


if __name__ == "__main__":
    load_dotenv()
    print("Starting exchange aggregator...")
    print("Press Ctrl+C to quit")
    print("-" * 50)
    try:
        asyncio.run(main(sys.argv[1:] or ["BTC/USD", "ETH/BTC"]))
    except KeyboardInterrupt:
        pass
