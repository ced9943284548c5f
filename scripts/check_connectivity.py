"""Verify that the configured Firestore collection answers feed queries."""

import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from stocknews.config import AppConfig, Secrets, load_config, resolve_ticker
from stocknews.store.base import FeedQuery, QueryError
from stocknews.store.firestore import FirestoreQueryService


async def check_firestore(config: AppConfig, secrets: Secrets) -> bool:
    """Run a one-record feed query against Firestore."""
    print("Checking Firestore...")
    ticker = resolve_ticker(config)
    try:
        service = FirestoreQueryService(config, secrets)
    except Exception as e:
        print(f"  Firestore client: FAILED - {e}")
        return False

    try:
        page = await service.query(
            FeedQuery(
                collection=config.feed.collection,
                filters={"stockTicker": ticker, "eventSource": config.feed.source},
                order_by="eventTime",
                limit=1,
            )
        )
        print(f"  Collection: {config.feed.collection}")
        if page.is_empty:
            print(f"  No {config.feed.source} documents for {ticker} (query and index OK)")
        else:
            latest = page.records[0]
            print(f"  Latest {ticker}: {latest.event_title[:80]} ({latest.event_time.isoformat()})")
        print("  Firestore: OK")
        return True
    except QueryError as e:
        print(f"  Firestore: FAILED ({e.kind.value}) - {e}")
        return False
    finally:
        await service.close()


def main():
    print("=" * 50)
    print("stocknews - Firestore Connectivity Check")
    print("=" * 50)

    try:
        config = load_config(Path("config/settings.yaml"))
        secrets = Secrets()
    except Exception as e:
        print(f"\nFailed to load configuration: {e}")
        print("Make sure config/settings.yaml exists and .env holds GCP_PROJECT_ID if needed")
        sys.exit(1)

    ok = asyncio.run(check_firestore(config, secrets))

    print("\n" + "=" * 50)
    if ok:
        print("All checks passed.")
    else:
        print("Some checks failed. Fix the issues above.")
        sys.exit(1)


if __name__ == "__main__":
    main()
