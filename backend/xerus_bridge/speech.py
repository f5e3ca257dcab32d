"""
Speech-recognition WebSocket probing.

Helpers behind the Deepgram debug script: URL construction, event parsing,
synthetic audio, and a single-connection probe that waits for a completion
signal (a transcript result, an error, the socket closing, or the timeout).
"""

import asyncio
import json
import logging
import math
import time
from array import array
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlencode

from websockets.asyncio.client import connect
from websockets.exceptions import WebSocketException

from .production_logger import perf

logger = logging.getLogger(__name__)

LISTEN_URL = "wss://api.deepgram.com/v1/listen"
DEFAULT_TIMEOUT = 10.0
SAMPLE_RATE = 24000

LISTEN_PARAMS = (
    "model",
    "encoding",
    "sample_rate",
    "language",
    "smart_format",
    "interim_results",
    "channels",
    "endpointing",
    "vad_events",
    "punctuate",
)


@dataclass
class ListenConfig:
    name: str
    params: dict[str, str]


LISTEN_CONFIGS = [
    ListenConfig(
        name="Basic Configuration",
        params={
            "model": "nova-2",
            "encoding": "linear16",
            "sample_rate": str(SAMPLE_RATE),
            "language": "en-US",
            "interim_results": "true",
            "channels": "1",
        },
    ),
    ListenConfig(
        name="Enhanced Configuration",
        params={
            "model": "nova-2",
            "encoding": "linear16",
            "sample_rate": str(SAMPLE_RATE),
            "language": "en-US",
            "smart_format": "true",
            "interim_results": "true",
            "channels": "1",
            "endpointing": "100",
            "vad_events": "true",
            "punctuate": "false",
        },
    ),
    ListenConfig(
        name="Minimal Configuration",
        params={"model": "nova-2", "encoding": "linear16", "sample_rate": str(SAMPLE_RATE)},
    ),
]


@dataclass
class SpeechEvent:
    type: str
    transcript: str = ""
    is_final: bool = False
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProbeResult:
    name: str
    url: str
    connected: bool = False
    timed_out: bool = False
    error: Optional[str] = None
    events: list[SpeechEvent] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.connected and self.error is None and not self.timed_out


def build_listen_url(params: dict[str, Any], base: str = LISTEN_URL) -> str:
    """Build the listen URL; unknown parameter names are rejected."""
    unknown = set(params) - set(LISTEN_PARAMS)
    if unknown:
        raise ValueError(f"Unknown listen parameter(s): {', '.join(sorted(unknown))}")
    ordered = [(key, str(params[key])) for key in LISTEN_PARAMS if key in params]
    return f"{base}?{urlencode(ordered)}" if ordered else base


def parse_event(raw: str | bytes) -> SpeechEvent:
    """
    Decode one inbound JSON message using its ``type`` discriminator.

    Frames that are not a JSON object come back as an ``Unknown`` event with
    the undecoded text under ``raw["raw"]``.
    """
    try:
        data = json.loads(raw)
    except ValueError:
        data = None
    if not isinstance(data, dict):
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        logger.warning(f"[Speech] Unrecognised frame: {text[:80]!r}")
        return SpeechEvent(type="Unknown", raw={"raw": text})

    event_type = data.get("type", "Unknown")
    if event_type != "Results":
        return SpeechEvent(type=event_type, raw=data)

    alternatives = (data.get("channel") or {}).get("alternatives") or [{}]
    return SpeechEvent(
        type=event_type,
        transcript=alternatives[0].get("transcript", ""),
        is_final=bool(data.get("is_final")),
        raw=data,
    )


def generate_tone(seconds: float = 1.0, sample_rate: int = SAMPLE_RATE, frequency: float = 440.0) -> bytes:
    """Synthetic mono linear16 (little-endian) sine tone."""
    count = int(seconds * sample_rate)
    samples = array(
        "h", (int(0.3 * 32767 * math.sin(2 * math.pi * frequency * i / sample_rate)) for i in range(count))
    )
    return samples.tobytes()


async def probe(
    config: ListenConfig,
    api_key: str,
    timeout: float = DEFAULT_TIMEOUT,
    send_audio: bool = False,
    chunk_size: int = 4800,
) -> ProbeResult:
    """
    Open one socket for ``config`` and wait for a completion signal.

    Without ``send_audio`` a successful handshake completes the probe. With it,
    a second of synthetic audio is streamed and the probe completes on the
    first ``Results`` message or when the server closes the stream.
    """
    url = build_listen_url(config.params)
    result = ProbeResult(name=config.name, url=url)
    started = time.perf_counter()
    try:
        async with asyncio.timeout(timeout):
            async with connect(url, additional_headers={"Authorization": f"Token {api_key}"}) as ws:
                result.connected = True
                if not send_audio:
                    return result

                audio = generate_tone(sample_rate=int(config.params.get("sample_rate", SAMPLE_RATE)))
                for start in range(0, len(audio), chunk_size):
                    await ws.send(audio[start : start + chunk_size])
                await ws.send(json.dumps({"type": "CloseStream"}))

                async for raw in ws:
                    event = parse_event(raw)
                    result.events.append(event)
                    if event.type == "Results":
                        break
    except TimeoutError:
        result.timed_out = True
    except (WebSocketException, OSError) as e:
        result.error = f"{type(e).__name__}: {e}"
        logger.error(f"[Speech] {config.name} failed: {result.error}")
    finally:
        perf(f"[Speech] {config.name}", start_time=started)
    return result
