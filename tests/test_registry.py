"""Tests for the command registry."""

import sys
import os
import threading

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from bot.registry import CommandEntry, CommandRegistry


class TestCommandRegistry:
    """Validate registration and lookup semantics."""

    def test_add_and_get(self) -> None:
        registry = CommandRegistry()
        registry.add("/ping", lambda chat_id: "pong", description="Ping")
        entry = registry.get("/ping")
        assert isinstance(entry, CommandEntry)
        assert entry.handler(1) == "pong"
        assert entry.description == "Ping"

    def test_miss_returns_none(self) -> None:
        assert CommandRegistry().get("/nothing") is None

    def test_last_registration_wins(self) -> None:
        registry = CommandRegistry()
        registry.add("/ping", lambda chat_id: "first")
        registry.add("/ping", lambda chat_id: "second")
        assert registry.get("/ping").handler(0) == "second"
        assert len(registry) == 1

    def test_exact_case_sensitive_match(self) -> None:
        registry = CommandRegistry()
        registry.add("/Ping", lambda chat_id: "pong")
        assert registry.get("/ping") is None
        assert registry.get("/Ping ") is None
        assert registry.get("/Ping@mybot") is None
        assert "/Ping" in registry

    def test_register_decorator(self) -> None:
        registry = CommandRegistry()

        @registry.register("/echo", description="Echo the chat id")
        def handle_echo(chat_id: int) -> str:
            return str(chat_id)

        assert handle_echo(5) == "5"
        assert registry.get("/echo").handler(9) == "9"

    def test_entries_is_snapshot(self) -> None:
        registry = CommandRegistry()
        registry.add("/a", lambda chat_id: "a")
        snapshot = registry.entries()
        registry.add("/b", lambda chat_id: "b")
        assert list(snapshot) == ["/a"]
        assert sorted(registry.entries()) == ["/a", "/b"]

    def test_shared_lock(self) -> None:
        lock = threading.RLock()
        registry = CommandRegistry(lock=lock)
        assert registry.lock is lock

    def test_concurrent_registration(self) -> None:
        registry = CommandRegistry()

        def register_many(prefix: str) -> None:
            for i in range(200):
                registry.add(f"/{prefix}{i}", lambda chat_id: "x")

        threads = [threading.Thread(target=register_many, args=(p,)) for p in "abcd"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(registry) == 800
