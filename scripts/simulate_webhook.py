"""
Send a test webhook to a running HookLog instance.

Usage:
    python scripts/simulate_webhook.py
    python scripts/simulate_webhook.py --source github --count 3
    python scripts/simulate_webhook.py --raw '{a:1'       # expect 400
"""
import argparse
import asyncio
import json
import logging

import httpx

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BASE_URL = "http://localhost:8000"

SAMPLE_PAYLOADS = {
    "github": {"action": "opened", "number": 42, "repository": {"full_name": "acme/app"}},
    "stripe": {"id": "evt_test_123", "type": "payment_intent.succeeded", "data": {"object": {"amount": 1999}}},
    "custom": {"event": "ping", "sent_by": "simulate_webhook"},
}


async def send_webhook(base_url: str, body: str, source: str | None) -> httpx.Response:
    """POST a raw body to /webhook, optionally tagged with a source header."""
    headers = {"Content-Type": "application/json"}
    if source:
        headers["X-Webhook-Source"] = source
    async with httpx.AsyncClient(timeout=30) as client:
        resp = await client.post(f"{base_url}/webhook", content=body, headers=headers)
        logger.info("Webhook response: %s %s", resp.status_code, resp.text)
        return resp


async def main():
    parser = argparse.ArgumentParser(description="Simulate inbound webhooks")
    parser.add_argument("--source", default="custom", help="X-Webhook-Source value ('' to omit)")
    parser.add_argument("--raw", default=None, help="Send this exact body instead of a sample payload")
    parser.add_argument("--count", type=int, default=1)
    parser.add_argument("--base-url", default=BASE_URL)
    args = parser.parse_args()

    if args.raw is not None:
        body = args.raw
    else:
        body = json.dumps(SAMPLE_PAYLOADS.get(args.source, SAMPLE_PAYLOADS["custom"]))

    for i in range(args.count):
        logger.info("Sending webhook %d/%d (source=%s)", i + 1, args.count, args.source or "<none>")
        await send_webhook(args.base_url, body, args.source or None)


if __name__ == "__main__":
    asyncio.run(main())
