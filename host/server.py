from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Set

import websockets
from websockets.asyncio.server import ServerConnection, serve

from notation.cards import ALL_CARDS
from notation.models import POSITIONS, ActionKind, Street, TableConfig, format_amount
from notation.session import SLOT_ORDER, HandSession
from notation.transcript import items_payload

LOGGER = logging.getLogger("notation_host")

# NotationServer exposes one HandSession to WebSocket clients. Commands are
# applied under a lock and every change is broadcast as a fresh snapshot;
# the session itself never touches the network.


class NotationServer:
    def __init__(self, config: TableConfig) -> None:
        self.config = config
        self.session = HandSession(config=config)
        self.clients: Set[ServerConnection] = set()
        self.lock = asyncio.Lock()

    async def start(self, host: str = "0.0.0.0", port: int = 8765) -> None:
        async with serve(self._handle_connection, host, port):
            LOGGER.info("Notation host listening on %s:%s", host, port)
            await asyncio.Future()

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        # First message must be "hello".
        hello = await self._read_message(websocket)
        if hello is None or hello.get("type") != "hello":
            await self._send_error(websocket, code="BAD_HELLO", msg="Expected hello")
            await websocket.close()
            return

        async with self.lock:
            self.clients.add(websocket)
            snapshot = self.session.state_payload()
        LOGGER.info("Client connected (%s total)", len(self.clients))

        await self._send_json(websocket, "welcome", self._welcome_payload())
        await self._send_json(websocket, "state", snapshot)

        try:
            async for raw in websocket:
                await self._handle_message(websocket, self._decode(raw))
        except websockets.ConnectionClosed:
            pass
        finally:
            async with self.lock:
                self.clients.discard(websocket)
            LOGGER.info("Client disconnected")

    def _welcome_payload(self) -> Dict[str, object]:
        return {
            "positions": [position.value for position in POSITIONS],
            "actions": [action.value for action in ActionKind],
            "streets": [street.value for street in Street],
            "slots": list(SLOT_ORDER),
            "cards": [card.label for card in ALL_CARDS],
            "config": {"sb": format_amount(self.config.sb), "bb": format_amount(self.config.bb)},
        }

    async def _handle_message(self, websocket: ServerConnection, message: Dict[str, object]) -> None:
        msg_type = message.get("type")
        if not isinstance(msg_type, str) or not msg_type:
            await self._send_error(websocket, code="BAD_SCHEMA", msg="type required")
            return
        if msg_type == "export":
            await self._handle_export(websocket, message)
            return

        handler = self._commands().get(msg_type)
        if handler is None:
            await self._send_error(websocket, code="UNKNOWN_TYPE", msg="Unsupported message type")
            return

        async with self.lock:
            try:
                handler(message)
            except ValueError as exc:
                LOGGER.warning("Rejected command type=%s reason=%s", msg_type, exc)
                await self._send_error(websocket, code="INVALID_COMMAND", msg=str(exc))
                return
            snapshot = self.session.state_payload()

        LOGGER.debug("Applied command %s", msg_type)
        await self._broadcast("state", snapshot)

    def _commands(self):
        session = self.session
        return {
            "setup": lambda msg: session.update_setup(
                hero_position=_optional_str(msg.get("hero_position")),
                effective_stack=_optional_str(msg.get("effective_stack")),
            ),
            "select_slot": lambda msg: session.select_slot(_required_str(msg, "slot")),
            "pick_card": lambda msg: session.pick_card(_required_str(msg, "card")),
            "clear_hero": lambda msg: session.clear_hero_cards(),
            "action": lambda msg: session.record_action(
                _optional_str(msg.get("position")),
                _optional_str(msg.get("action")),
                _optional_str(msg.get("size")),
            ),
            "board": lambda msg: session.record_board(_required_str(msg, "street")),
            "next_street": lambda msg: session.next_street(),
            "undo": lambda msg: session.undo(),
            "clear": lambda msg: session.clear(),
            "end_hand": lambda msg: session.end_hand(),
        }

    async def _handle_export(self, websocket: ServerConnection, message: Dict[str, object]) -> None:
        index = message.get("index", 0)
        if not isinstance(index, int) or isinstance(index, bool):
            await self._send_error(websocket, code="BAD_SCHEMA", msg="index must be an integer")
            return
        async with self.lock:
            try:
                saved = self.session.export(index)
            except IndexError as exc:
                await self._send_error(websocket, code="NOT_FOUND", msg=str(exc))
                return
            payload = {"title": saved.title, "text": saved.text, "items": items_payload(saved.items)}
        await self._send_json(websocket, "transcript", payload)

    async def _broadcast(self, msg_type: str, payload: Dict[str, object]) -> None:
        async with self.lock:
            targets = list(self.clients)
        if not targets:
            return
        message = self._envelope(msg_type, payload)
        await asyncio.gather(*(socket.send(message) for socket in targets), return_exceptions=True)

    async def _send_json(self, websocket: ServerConnection, msg_type: str, payload: Dict[str, object]) -> None:
        try:
            await websocket.send(self._envelope(msg_type, payload))
        except websockets.ConnectionClosed:
            pass

    async def _send_error(self, websocket: ServerConnection, code: str, msg: str) -> None:
        await self._send_json(websocket, "error", {"code": code, "msg": msg})

    def _envelope(self, msg_type: str, payload: Dict[str, object]) -> str:
        body = {"type": msg_type, "v": 1, "ts": datetime.now(timezone.utc).isoformat()}
        body.update(payload)
        return json.dumps(body)

    async def _read_message(self, websocket: ServerConnection) -> Optional[Dict[str, object]]:
        try:
            raw = await asyncio.wait_for(websocket.recv(), timeout=5)
        except (asyncio.TimeoutError, websockets.ConnectionClosed):
            return None
        return self._decode(raw)

    def _decode(self, raw: str) -> Dict[str, object]:
        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return message if isinstance(message, dict) else {}


def _optional_str(value: object) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _required_str(message: Dict[str, object], key: str) -> str:
    value = message.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"{key} required")
    return value
