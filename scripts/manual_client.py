#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import websockets
from websockets.asyncio.client import ClientConnection, connect

logging.basicConfig(level=logging.INFO)

# ManualClient is a terminal front end for the notation host: type short
# commands, watch the pot and the log update.

HELP = """Commands:
  a POS ACTION [SIZE]   record an action (e.g. "a BTN raise 3", "a BB call")
  s SLOT                select a card slot (H1 H2 F1 F2 F3 T R)
  p CARD                put CARD into the selected slot (e.g. "p As")
  b STREET              deal FLOP/TURN/RIVER from the slots
  n                     mark the next street without cards
  hero POS [EFF]        set hero position and effective stack
  u / c / e             undo / clear / end hand
  x [N]                 export saved hand N (0 = newest)
  h                     this help
  q                     quit"""


def parse_command(line: str) -> Optional[Dict[str, Any]]:
    parts = line.split()
    if not parts:
        return None
    cmd = parts[0].lower()
    args = parts[1:]

    if cmd == "a" and len(args) >= 2:
        payload: Dict[str, Any] = {"type": "action", "position": args[0].upper(), "action": _action_name(args[1])}
        if len(args) > 2:
            payload["size"] = args[2]
        return payload
    if cmd == "s" and args:
        return {"type": "select_slot", "slot": args[0].upper()}
    if cmd == "p" and args:
        return {"type": "pick_card", "card": args[0]}
    if cmd == "b" and args:
        return {"type": "board", "street": args[0].upper()}
    if cmd == "n":
        return {"type": "next_street"}
    if cmd == "hero" and args:
        payload = {"type": "setup", "hero_position": args[0].upper()}
        if len(args) > 1:
            payload["effective_stack"] = args[1]
        return payload
    if cmd == "u":
        return {"type": "undo"}
    if cmd == "c":
        return {"type": "clear"}
    if cmd == "e":
        return {"type": "end_hand"}
    if cmd == "x":
        index = int(args[0]) if args and args[0].isdigit() else 0
        return {"type": "export", "index": index}
    return None


def _action_name(raw: str) -> str:
    name = raw.upper()
    if name in ("ALLIN", "ALL_IN", "SHOVE"):
        return "ALL-IN"
    if name == "BET":
        return "RAISE"
    return name


def render_state(msg: Dict[str, Any]) -> List[str]:
    betting = msg.get("betting", {})
    lines = [
        f"{msg.get('setup', '')}",
        f"Street {betting.get('street')} | Pot={betting.get('pot')}bb | To call={betting.get('to_call')}bb",
    ]
    for seat in betting.get("seats", []):
        tag = " [FOLD]" if seat.get("has_folded") else ""
        lines.append(
            f"  {seat['position']:>3}: committed={seat['committed']:>5} street={seat['street_contribution']:>5}{tag}"
        )
    slots = msg.get("slots", {})
    selected = msg.get("selected_slot")
    lines.append(
        "Slots: "
        + " ".join(
            f"{'*' if slot == selected else ''}{slot}={card or '--'}" for slot, card in slots.items()
        )
    )
    log = msg.get("log", [])
    lines.append("Log: " + (" | ".join(log) if log else "(empty)"))
    saved = msg.get("saved_hands", [])
    if saved:
        lines.append(f"Saved: {', '.join(saved)}")
    return lines


class ManualClient:
    def __init__(self, url: str) -> None:
        self.url = url
        self.websocket: Optional[ClientConnection] = None

    async def run(self) -> None:
        async with connect(self.url) as ws:
            self.websocket = ws
            await self._send({"type": "hello", "v": 1})
            receiver = asyncio.create_task(self._receive_loop())
            try:
                await self._input_loop()
            finally:
                receiver.cancel()

    async def _receive_loop(self) -> None:
        assert self.websocket is not None
        try:
            async for raw in self.websocket:
                self._print_message(json.loads(raw))
        except websockets.ConnectionClosed:
            print("Connection closed by host")

    async def _input_loop(self) -> None:
        while True:
            line = await asyncio.to_thread(input, "> ")
            line = line.strip()
            if line.lower() == "q":
                return
            if line.lower() == "h":
                print(HELP)
                continue
            payload = parse_command(line)
            if payload is None:
                print("Unknown command (h=help)")
                continue
            await self._send(payload)

    def _print_message(self, msg: Dict[str, Any]) -> None:
        msg_type = msg.get("type")
        print(f"\n>>> {str(msg_type).upper()}")
        if msg_type == "welcome":
            print(f"Positions: {' '.join(msg.get('positions', []))} | blinds: {json.dumps(msg.get('config'))}")
        elif msg_type == "state":
            for line in render_state(msg):
                print(line)
        elif msg_type == "transcript":
            print(msg.get("text", ""))
        elif msg_type == "error":
            print(f"Error {msg.get('code')}: {msg.get('msg')}")
        else:
            print(json.dumps(msg, indent=2))

    async def _send(self, payload: Dict[str, Any]) -> None:
        assert self.websocket is not None
        await self.websocket.send(json.dumps(payload))


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Poker hand notation manual client")
    parser.add_argument("--url", default="ws://127.0.0.1:8765")
    return parser.parse_args(argv)


def main(argv: list[str]) -> None:
    args = parse_args(argv)
    client = ManualClient(url=args.url)
    try:
        asyncio.run(client.run())
    except KeyboardInterrupt:
        print("\nSession closed")


if __name__ == "__main__":
    main(sys.argv[1:])
