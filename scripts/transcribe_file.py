"""Run one local audio file through intake, AssemblyAI and polling.

Usage: python scripts/transcribe_file.py path/to/audio.wav

Nothing is persisted; the staged copy is removed when the script exits.
"""

import asyncio
import os
import sys
from pathlib import Path

from starlette.datastructures import Headers, UploadFile

# Add project root to path so we can import scribe
sys.path.append(os.getcwd())

from scribe.config.settings import settings  # noqa: E402
from scribe.pipelines.transcription import (  # noqa: E402
    IntakeValidator,
    JobPoller,
    TranscriptionOptions,
    TranscriptionPipelineError,
)
from scribe.services import AssemblyAIClient, staged_file  # noqa: E402


async def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: python scripts/transcribe_file.py path/to/audio")
        return 2

    file_path = Path(sys.argv[1])
    if not file_path.exists():
        print(f"File '{file_path}' not found.")
        return 2

    client = AssemblyAIClient(settings.provider)
    validator = IntakeValidator(settings.intake)
    poller = JobPoller(client, settings.polling)

    with file_path.open("rb") as fp:
        upload = UploadFile(
            fp,
            size=file_path.stat().st_size,
            filename=file_path.name,
            headers=Headers({}),
        )
        try:
            staged = await validator.validate(upload)
            async with staged_file(staged):
                print(f"Uploading {staged.original_name} ({staged.size} bytes)...")
                handle = await client.submit_audio(staged)
                job_id = await client.start_job(handle, TranscriptionOptions())
                print(f"Polling job {job_id}...")
                outcome = await poller.run(job_id)
        except TranscriptionPipelineError as exc:
            print(f"\n{exc.error_code}: {exc}")
            return 1
        finally:
            await client.aclose()

    if outcome.error is not None:
        print(f"\n{outcome.error.error_code}: {outcome.error}")
        return 1

    print("\n--- Transcript Result ---")
    print(outcome.text)
    print("-------------------------")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
