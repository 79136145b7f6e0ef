"""Parse rebalance transactions and print LP / lending position summaries.

Usage:
    PYTHONPATH=src python scripts/parse_tx.py 0xabc... 0xdef... --chain-id 8453
"""

import argparse
import asyncio
import logging

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


async def main(tx_hashes: list[str], chain_id: str) -> None:
    from txlens.accounting.lending_tracker import track_lending_positions
    from txlens.accounting.lp_tracker import track_position_flows
    from txlens.container import Container
    from txlens.report.text_formatter import (
        format_lending_positions,
        format_parsed_transaction,
        format_position_tracking,
    )

    container = Container()
    logging.getLogger().setLevel(container.settings().log_level.upper())
    parser = container.transaction_parser()

    try:
        parsed_txs = []
        for tx_hash in tx_hashes:
            parsed = await parser.parse_transaction(tx_hash, chain_id, include_raw_logs=False)
            parsed_txs.append((tx_hash, parsed))
            print(format_parsed_transaction(parsed))
            print()

        print(format_position_tracking(track_position_flows(parsed_txs, chain_id), chain_id))
        print(format_lending_positions(track_lending_positions(parsed_txs, chain_id), chain_id))
    finally:
        await container.http_client().close()


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("tx_hashes", nargs="+", metavar="TX_HASH")
    ap.add_argument("--chain-id", default=None, help="EVM chain id (default: settings.default_chain_id)")
    args = ap.parse_args()

    from txlens.config import settings

    asyncio.run(main(args.tx_hashes, args.chain_id or settings.default_chain_id))
