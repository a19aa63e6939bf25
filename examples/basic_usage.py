"""Fetch a post from JSONPlaceholder with logging enabled.

Run with: python examples/basic_usage.py
"""

import asyncio

from flex_http import FlexHttpBuilder, LoggingInterceptor, init_logging


async def main() -> None:
    init_logging()
    client = (
        FlexHttpBuilder(base_url="https://jsonplaceholder.typicode.com")
        .with_logging(True)
        .with_max_retries(1)
        .with_interceptor(LoggingInterceptor())
        .build()
    )
    async with client:
        response = await client.get("/posts/1", use_cache=True)
        print(f"Post Title: {response.decoded_body()['title']}")

        async with client.stream("/posts/1") as events:
            async for event in events:
                print(f"Chunk [{event.status_code}]: {len(event.data)} chars")


if __name__ == "__main__":
    asyncio.run(main())
