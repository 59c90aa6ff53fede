#!/usr/bin/env python3
# This project was developed with assistance from AI tools.
"""Live smoke suite for the Dealer Chat API.

Exercises the health endpoint, the embed loader, relay validation, and a
real multi-turn conversation (through the widget client) against a running
server instance.

Prerequisites:
  - API server running on localhost:8000 (uvicorn src.main:app)
  - Database migrated (alembic upgrade head in packages/db)
  - TOGETHER_API_KEY configured for the chat section (skip with --no-chat)

Usage:
  ./scripts/live-tests.py                 # full suite
  ./scripts/live-tests.py --no-chat       # skip tests that call the LLM
  ./scripts/live-tests.py --base http://localhost:9000
"""

import argparse
import asyncio
import re
import sys

import httpx

from chat_widget import MemoryStorage, create_chat_widget
from chat_widget.widget import SEND_ERROR_MESSAGE

BASE = "http://localhost:8000"
HEADERS = {"Origin": "http://localhost:3000"}
DOMAIN = "localhost"

UNAUTHORIZED_BODY = {
    "error": "Unauthorized domain. Please sign up for our service to use this feature."
}

# ---------------------------------------------------------------------------
# Test runner
# ---------------------------------------------------------------------------

PASS = 0
FAIL = 0
ERRORS: list[str] = []
SECTION = ""


def section(name: str):
    global SECTION
    SECTION = name
    print(f"\n{'=' * 60}")
    print(f"  {name}")
    print(f"{'=' * 60}\n")


def ok(name: str, passed: bool, detail: str = ""):
    global PASS, FAIL
    if passed:
        PASS += 1
        print(f"  PASS  {name}")
    else:
        FAIL += 1
        msg = f"[{SECTION}] {name}: {detail}" if detail else f"[{SECTION}] {name}"
        ERRORS.append(msg)
        print(f"  FAIL  {name} -- {detail}")


# ---------------------------------------------------------------------------
# 1. Health
# ---------------------------------------------------------------------------

async def test_health(c: httpx.AsyncClient):
    section("Health")

    r = await c.get("/health/")
    ok("GET /health/ returns 200", r.status_code == 200)
    data = r.json()
    ok("response is a list", isinstance(data, list))
    ok("contains API service", any(s.get("name") == "API" for s in data))
    ok("contains DB service", any(s.get("name") == "Database" for s in data))
    ok("database is healthy",
       any(s.get("name") == "Database" and s.get("status") == "healthy" for s in data))


# ---------------------------------------------------------------------------
# 2. Embed loader
# ---------------------------------------------------------------------------

async def test_embed_loader(c: httpx.AsyncClient):
    section("Embed loader")

    r = await c.get("/chat-widget.js")
    ok("GET /chat-widget.js returns 200", r.status_code == 200)
    ok("served as javascript",
       r.headers.get("content-type", "").startswith("application/javascript"))
    ok("not cacheable", r.headers.get("cache-control") == "no-store")
    ok("calls createChatWidget", "createChatWidget" in r.text)

    ids = set()
    for _ in range(3):
        match = re.search(r'"(chat-widget-[0-9a-z]{9})"', (await c.get("/chat-widget.js")).text)
        if match:
            ids.add(match.group(1))
    ok("fresh container id per load", len(ids) == 3, f"got {ids}")


# ---------------------------------------------------------------------------
# 3. Relay validation (no LLM calls)
# ---------------------------------------------------------------------------

async def test_relay_validation(c: httpx.AsyncClient):
    section("Relay validation")

    r = await c.post("/api/chat", json={"message": "Hi", "customerDomain": "evil.com"})
    ok("unlisted domain returns 401", r.status_code == 401)
    ok("unauthorized body is exact", r.json() == UNAUTHORIZED_BODY, r.text)

    r = await c.post("/api/chat", json={"message": "Hi"})
    ok("missing domain returns 401", r.status_code == 401)

    r = await c.post("/api/chat", json={"message": "", "customerDomain": DOMAIN})
    ok("empty message returns 400", r.status_code == 400)
    ok("invalid body error text", r.json() == {"error": "Invalid request data"}, r.text)

    r = await c.post("/api/chat", json={
        "message": "Hi", "customerDomain": DOMAIN, "conversationId": "does-not-exist",
    })
    ok("unknown conversation returns 400", r.status_code == 400)

    r = await c.get("/api/nope")
    ok("unknown route returns 404", r.status_code == 404)
    ok("404 uses error body", r.json() == {"error": "Not Found"}, r.text)


# ---------------------------------------------------------------------------
# 4. Conversation (calls the LLM)
# ---------------------------------------------------------------------------

async def test_conversation(c: httpx.AsyncClient):
    section("Conversation (LLM)")

    r = await c.post("/api/chat", json={
        "message": "Hi, what services do you offer?", "customerDomain": DOMAIN,
    })
    ok("first turn returns 200", r.status_code == 200, r.text)
    if r.status_code != 200:
        return
    body = r.json()
    ok("response is non-empty", bool(body.get("response")))
    conversation_id = body.get("conversationId")
    ok("conversationId returned", bool(conversation_id))

    r = await c.post("/api/chat", json={
        "message": "I'd like to book an oil change.",
        "customerDomain": DOMAIN,
        "conversationId": conversation_id,
    })
    ok("second turn returns 200", r.status_code == 200, r.text)
    ok("conversationId is stable", r.json().get("conversationId") == conversation_id)


async def test_widget_client():
    section("Widget client (LLM)")

    async with httpx.AsyncClient(base_url=BASE, headers=HEADERS, timeout=60) as http:
        storage = MemoryStorage()
        widget = create_chat_widget(
            {"customerId": DOMAIN, "theme": {"primaryColor": "#007bff"}},
            storage=storage,
            http_client=http,
        )
        widget.toggle()
        ok("welcome message shown on open", len(widget.messages) == 1)

        reply = await widget.submit("Do you have any SUVs in stock?")
        ok("widget got a reply", reply is not None and reply.content != SEND_ERROR_MESSAGE,
           reply.content if reply else "no reply")
        ok("conversation id cached", widget.conversation_id is not None)

        remounted = create_chat_widget({"customerId": DOMAIN}, storage=storage, http_client=http)
        ok("log restored on remount", len(remounted.messages) == len(widget.messages))
        ok("conversation id restored", remounted.conversation_id == widget.conversation_id)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

async def main():
    global BASE
    parser = argparse.ArgumentParser(description="Live smoke suite for the Dealer Chat API")
    parser.add_argument("--no-chat", action="store_true",
                        help="Skip tests that call the completion provider")
    parser.add_argument("--base", default=BASE, help=f"Server URL (default {BASE})")
    args = parser.parse_args()
    BASE = args.base

    async with httpx.AsyncClient(base_url=BASE, headers=HEADERS, timeout=60) as c:

        # Pre-flight: make sure server is up
        try:
            r = await c.get("/health/")
            if r.status_code != 200:
                print(f"\n  Server returned {r.status_code} on /health/ -- is it running?")
                sys.exit(2)
        except httpx.ConnectError:
            print(f"\n  Cannot connect to server at {BASE} -- is it running?")
            sys.exit(2)

        await test_health(c)
        await test_embed_loader(c)
        await test_relay_validation(c)
        if not args.no_chat:
            await test_conversation(c)

    if not args.no_chat:
        await test_widget_client()

    # Summary
    print(f"\n{'=' * 60}")
    print(f"  RESULTS: {PASS} passed, {FAIL} failed")
    print(f"{'=' * 60}")

    if ERRORS:
        print("\nFailures:")
        for e in ERRORS:
            print(f"  - {e}")

    sys.exit(0 if FAIL == 0 else 1)


if __name__ == "__main__":
    asyncio.run(main())
