#!/usr/bin/env python3
"""
Probe the speech-to-text streaming endpoint with each listen configuration.

Probes run one after another. Requires DEEPGRAM_API_KEY; exits 1 when it is
missing or any probe fails.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

# Add backend directory to path
backend_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(backend_dir))

from scripts.script_helpers import banner, configure_logging
from xerus_bridge.config import settings
from xerus_bridge.speech import DEFAULT_TIMEOUT, LISTEN_CONFIGS, ProbeResult, probe


def describe(result: ProbeResult) -> str:
    if result.ok:
        transcripts = [e.transcript for e in result.events if e.transcript]
        suffix = f" ({len(result.events)} event(s))" if result.events else ""
        line = f"[OK] {result.name}: connected{suffix}"
        if transcripts:
            line += f"\n    transcript: {transcripts[0]!r}"
        return line
    if result.timed_out:
        return f"[ERROR] {result.name}: timed out"
    return f"[ERROR] {result.name}: {result.error or 'not connected'}"


async def run_probes(api_key: str, timeout: float, send_audio: bool) -> list[ProbeResult]:
    results = []
    for config in LISTEN_CONFIGS:
        print(f"\n[TEST] {config.name}")
        result = await probe(config, api_key, timeout=timeout, send_audio=send_audio)
        print(f"  URL: {result.url}")
        print(describe(result))
        results.append(result)
    return results


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Probe the streaming speech endpoint")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT)
    parser.add_argument("--send-audio", action="store_true", help="Stream a synthetic tone")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    banner("Speech WebSocket Check")

    if not settings.deepgram_api_key:
        print("[ERROR] DEEPGRAM_API_KEY is not set")
        return 1

    results = asyncio.run(run_probes(settings.deepgram_api_key, args.timeout, args.send_audio))
    passed = sum(1 for r in results if r.ok)
    print(f"\n{passed}/{len(results)} configuration(s) connected")
    return 0 if passed == len(results) else 1


if __name__ == "__main__":
    sys.exit(main())
