"""Tests for search generation tokens."""

from __future__ import annotations

import threading

from gitscope.mcp.generations import SearchGenerations


class TestSearchGenerations:
    def test_first_generation_is_one(self) -> None:
        assert SearchGenerations().issue("repo") == 1

    def test_generations_increase(self) -> None:
        gens = SearchGenerations()
        assert [gens.issue("repo") for _ in range(3)] == [1, 2, 3]

    def test_only_latest_is_current(self) -> None:
        gens = SearchGenerations()
        first = gens.issue("repo")
        second = gens.issue("repo")
        assert gens.is_current("repo", first) is False
        assert gens.is_current("repo", second) is True
        assert gens.latest("repo") == second

    def test_channels_are_independent(self) -> None:
        gens = SearchGenerations()
        a = gens.issue("a")
        gens.issue("b")
        gens.issue("b")
        assert gens.is_current("a", a) is True
        assert gens.latest("b") == 2

    def test_unknown_channel(self) -> None:
        gens = SearchGenerations()
        assert gens.latest("nope") is None
        assert gens.is_current("nope", 1) is False

    def test_concurrent_issue_is_unique(self) -> None:
        gens = SearchGenerations()
        issued: list[int] = []
        lock = threading.Lock()

        def worker() -> None:
            for _ in range(100):
                g = gens.issue("repo")
                with lock:
                    issued.append(g)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(issued) == list(range(1, 801))
        assert gens.latest("repo") == 800
