"""Example: ask a question through the relay library without running the server."""

import asyncio
import os

from extension_relay import Answer, RelayConfig, ask_question


async def main():
    """Send one question and print the normalized answer."""
    config = RelayConfig(
        api_key=os.environ["HF_API_KEY"],
        api_style="chat",
        default_model="meta-llama/Llama-3.1-8B-Instruct",
    )

    print("Asking...")
    result = await ask_question(
        "What is the difference between a process and a thread?",
        config,
        prompt_template="You are an interviewer. Answer in two sentences: {question}",
    )

    if isinstance(result, Answer):
        print(f"\nAnswer: {result.text}")
    else:
        print(f"\nUpstream failed ({result.status_code}): {result.message}")


if __name__ == "__main__":
    asyncio.run(main())
