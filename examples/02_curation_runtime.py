# examples/02_curation_runtime.py
"""
🧠 FULL CURATION LOOP

Wires the whole curator onto one bus with a console "tab" standing in for
the feed observer:

1. install (seeds default interests) and start curating
2. the local sentence-transformers model loads in the background
   (pip install "feed-curator[embeddings]"); until it is ready, or if it
   cannot be downloaded, items are classified by the rule-based fallback
3. evaluation requests flow in, hide directives flow out

State is persisted to ./curator_state.json.
"""

import asyncio
import logging

from feed_curator import CurationRuntime, FeedTarget, JsonFileStore, derive_item_id
from feed_curator.embeddings import SentenceTransformerFactory
from feed_curator.models import EvaluationRequest
from feed_curator.models.messages import EvaluateTweet, StartCuration, StopCuration

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

FEED = [
    ("@chipwatch", "TSMC details its next semiconductors node"),
    ("@promo", "Sponsored: the best mattress you will ever own"),
    ("@lab", "Researchers published new findings on protein folding"),
    ("@random", "What I had for breakfast"),
]


class ConsoleTab:
    """A single open feed tab that prints every directive it receives."""

    def __init__(self):
        self.target = FeedTarget(target_id=1, url="https://x.com/home")

    async def list_targets(self):
        return [self.target]

    async def active_target(self):
        return self.target

    async def send(self, target_id, directive):
        if directive.type != "PING":
            print(f"   📨 tab {target_id} <- {directive.to_wire()}")
        return {"success": True}

    async def inject(self, target_id):
        print(f"   💉 observer injected into tab {target_id}")


async def ui(message):
    if message.type == "ACTIVITY_LOG":
        p = message.payload
        print(f"📝 {p.decision.upper():7} {p.tweet_text[:50]!r} ({p.reason})")
    elif message.type == "AI_LOAD_PROGRESS":
        print(f"⏳ {message.payload.progress:3}% {message.payload.status}")
    elif message.type == "AI_LOAD_FAILED":
        print(f"⚠️  {message.payload.error}")


async def main():
    runtime = CurationRuntime(
        SentenceTransformerFactory(),
        ConsoleTab(),
        store=JsonFileStore("curator_state.json"),
        ui=ui,
    )
    await runtime.install()

    response = await runtime.send(StartCuration())
    print(f"▶️  start: {response.data}")

    # Give the model a moment; items arriving earlier use the fallback rules
    await asyncio.sleep(2)

    for author, text in FEED:
        item = EvaluationRequest(id=derive_item_id(username=author, text=text), text=text)
        await runtime.send(EvaluateTweet(payload=item), timeout=180)

    await runtime.send(StopCuration())
    await runtime.bus.drain()

    log = await runtime.orchestrator.export_log()
    print(f"\n📚 Decision log holds {len(log)} entries")
    await runtime.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
