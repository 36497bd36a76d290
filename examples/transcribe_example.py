"""Example: transcribe a WAV file through the relay library."""

import asyncio
import base64
import os
import sys
from pathlib import Path

from extension_relay import RelayConfig, Transcript, transcribe_audio


async def main(audio_path: str):
    """Base64-encode an audio file and print its transcript."""
    config = RelayConfig(api_key=os.environ["HF_API_KEY"])
    audio_base64 = base64.b64encode(Path(audio_path).read_bytes()).decode("ascii")

    print(f"Transcribing {audio_path}...")
    result = await transcribe_audio(audio_base64, config)

    if isinstance(result, Transcript):
        print(f"\nTranscript: {result.text or '(nothing recognized)'}")
    else:
        print(f"\nUpstream failed ({result.status_code}): {result.message}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python examples/transcribe_example.py <audio.wav>")
        sys.exit(1)
    asyncio.run(main(sys.argv[1]))
