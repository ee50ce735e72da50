"""
Command-line interface for the Steam price cache.

Provides the refresh command plus single-call commands for
checking the IsThereAnyDeal endpoints by hand.
"""

import asyncio
import json
import sys
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from price_cache.config import LoggingConfig, get_settings
from price_cache.logger import get_logger, setup_logging

logger = get_logger(__name__, component="cli")


class CLIOutput(BaseModel):
    """Structured output for CLI commands."""

    success: bool
    command: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | list[Any] | None = None
    error: str | None = None


def print_json(output: CLIOutput) -> None:
    """Print output as formatted JSON."""
    print(json.dumps(output.model_dump(), indent=2, default=str))


async def cmd_refresh() -> bool:
    """Refresh the price snapshot."""
    from price_cache.ingestion.orchestrator import PriceCacheOrchestrator

    def on_progress(completed: int, total: int) -> None:
        bar_length = 30
        filled = int(bar_length * completed / total) if total else bar_length
        bar = "█" * filled + "░" * (bar_length - filled)
        print(f"\r  [{bar}] {completed}/{total} lookups", end="", file=sys.stderr, flush=True)

    async with PriceCacheOrchestrator() as orchestrator:
        result = await orchestrator.run(on_progress=on_progress)

    if result.looked_up:
        print(file=sys.stderr)

    print_json(CLIOutput(success=True, command="refresh", data=result.to_dict()))
    return True


async def cmd_lookup(steam_id: str) -> bool:
    """Look up the ITAD game for one Steam app ID."""
    from price_cache.ingestion.extractors import GameLookupExtractor

    async with GameLookupExtractor() as extractor:
        result = await extractor.extract(steam_id)

    print_json(
        CLIOutput(
            success=result.success,
            command="lookup",
            data=result.data.model_dump() if result.data else None,
            error=result.error_message,
        )
    )
    return result.success


async def cmd_prices(game_ids_str: str) -> bool:
    """Fetch prices for comma-separated ITAD game IDs."""
    from price_cache.ingestion.extractors import GamePricesExtractor

    game_ids = [x.strip() for x in game_ids_str.split(",") if x.strip()]

    async with GamePricesExtractor() as extractor:
        result = await extractor.extract(game_ids)

    print_json(
        CLIOutput(
            success=result.success,
            command="prices",
            data=[p.model_dump(mode="json") for p in result.data.prices] if result.data else None,
            error=result.error_message,
        )
    )
    return result.success


async def cmd_test_config() -> bool:
    """Test configuration loading."""
    settings = get_settings()

    print_json(
        CLIOutput(
            success=True,
            command="test-config",
            data={
                "itad_base_url": settings.itad.base_url,
                "country": settings.itad.country,
                "lookup_interval_seconds": settings.itad.lookup_interval_seconds,
                "catalog_path": str(settings.cache.catalog_path),
                "snapshot_path": str(settings.cache.snapshot_path),
                "retain_delisted": settings.cache.retain_delisted,
                "api_key_configured": bool(settings.itad.api_key.get_secret_value()),
            },
        )
    )
    return True


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
Steam Price Cache CLI
=====================

Usage: price-cache <command> [arguments]

Commands:
  refresh                     Refresh the price snapshot from the catalog
  lookup <steam_id>           Look up the ITAD game for a Steam app ID
  prices <game_ids>           Fetch prices for comma-separated ITAD game IDs
  test-config                 Test configuration loading

Configuration is read from the environment and .env
(ITAD_API_KEY, ITAD_COUNTRY, CACHE_CATALOG_PATH, CACHE_SNAPSHOT_PATH, ...).
"""
    print(usage)


def main() -> None:
    """Main CLI entry point."""
    setup_logging(LoggingConfig())

    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1]

    try:
        if command == "refresh":
            ok = asyncio.run(cmd_refresh())

        elif command == "lookup":
            if len(sys.argv) < 3:
                print("Error: steam_id required")
                sys.exit(1)
            ok = asyncio.run(cmd_lookup(sys.argv[2]))

        elif command == "prices":
            if len(sys.argv) < 3:
                print("Error: game_ids required (comma-separated)")
                sys.exit(1)
            ok = asyncio.run(cmd_prices(sys.argv[2]))

        elif command == "test-config":
            ok = asyncio.run(cmd_test_config())

        elif command in ("help", "--help", "-h"):
            print_usage()
            ok = True

        else:
            print(f"Unknown command: {command}")
            print_usage()
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        logger.exception("CLI error", error=str(e))
        print_json(CLIOutput(success=False, command=command, error=str(e)))
        sys.exit(1)

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
