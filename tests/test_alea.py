"""
Tests for chaos.alea and chaos.config

The stateful generator must match hand-threaded engine calls.
"""

import numpy as np
import pytest

from chaos.alea import ChaosRandom
from chaos.config import ChaosConfig, DEFAULT_ROUNDS
from chaos.engine import fill_big_integers, fill_bytes, fill_integers
from chaos.errors import ChaosError, ChaosErrorKind
from chaos.locale import Locale


class TestChaosRandom:

    def test_matches_engine(self, kernel):
        rng = ChaosRandom(kernel)

        raw = bytearray(70)
        loc = fill_bytes(raw, kernel, DEFAULT_ROUNDS, Locale())
        ints = np.empty(5, dtype=np.int32)
        loc = fill_integers(ints, -10, 10, kernel, DEFAULT_ROUNDS, loc)
        bigs = [0] * 3
        loc = fill_big_integers(bigs, 0, 1 << 300, kernel, DEFAULT_ROUNDS, loc)

        assert rng.random_bytes(70) == bytes(raw)
        np.testing.assert_array_equal(rng.integers(5, -10, 10, dtype=np.int32), ints)
        assert rng.big_integers(3, 0, 1 << 300) == bigs
        assert rng.locale == loc

    def test_fresh_kernel_when_omitted(self):
        a, b = ChaosRandom(), ChaosRandom()
        assert len(a.kernel) == 8
        assert a.random_bytes(32) != b.random_bytes(32)

    def test_starts_from_config_locale(self, kernel):
        rng = ChaosRandom(kernel, ChaosConfig(rounds=8, pebble=5, stream=2))
        assert rng.locale == Locale(5, 2)
        assert rng.rounds == 8

    def test_skip(self, kernel):
        rng = ChaosRandom(kernel)
        assert rng.skip(3) == Locale(3, 0)
        expected = bytearray(16)
        fill_bytes(expected, kernel, DEFAULT_ROUNDS, Locale(3, 0))
        assert rng.random_bytes(16) == bytes(expected)

    def test_random_bytes_empty(self, kernel):
        rng = ChaosRandom(kernel)
        assert rng.random_bytes(0) == b""
        assert rng.locale == Locale()

    def test_randrange_and_randint(self, kernel):
        rng = ChaosRandom(kernel)
        assert rng.randrange(1) == 0
        assert all(0 <= rng.randrange(10) < 10 for _ in range(50))
        assert all(-3 <= rng.randint(-3, 3) <= 3 for _ in range(50))
        assert 0 <= rng.randrange(1 << 200) < (1 << 200)
        with pytest.raises(ValueError):
            rng.randrange(0)
        with pytest.raises(ValueError):
            rng.randint(2, 1)

    def test_rand_u32_array(self, kernel):
        rng = ChaosRandom(kernel)
        arr = rng.rand_u32_array(16)
        assert arr.dtype == np.dtype(">u4")
        expected = bytearray(64)
        fill_bytes(expected, kernel, DEFAULT_ROUNDS, Locale())
        assert arr.tobytes() == bytes(expected)
        assert len(rng.rand_u32_array(0)) == 0

    def test_spawn_disjoint(self, kernel):
        rng = ChaosRandom(kernel)
        children = rng.spawn(3, 4)
        assert [c.locale for c in children] == [Locale(0, 0), Locale(4, 0), Locale(8, 0)]
        assert rng.locale == Locale(12, 0)

        # each child owns 4 pebbles = 256 bytes
        streams = [c.random_bytes(256) for c in children]
        whole = bytearray(768)
        fill_bytes(whole, kernel, DEFAULT_ROUNDS, Locale())
        assert b"".join(streams) == bytes(whole)

    def test_order_independent_workers(self, kernel):
        a = ChaosRandom(kernel).spawn(2, 10)
        b = ChaosRandom(kernel).spawn(2, 10)
        second_first = b[1].integers(20, 0, 100)
        first_first = a[0].integers(20, 0, 100)
        np.testing.assert_array_equal(a[1].integers(20, 0, 100), second_first)
        np.testing.assert_array_equal(b[0].integers(20, 0, 100), first_first)

    def test_invalid_rounds_from_config(self, kernel):
        rng = ChaosRandom(kernel, ChaosConfig(rounds=7))
        with pytest.raises(ChaosError) as exc:
            rng.random_bytes(1)
        assert exc.value.kind is ChaosErrorKind.INVALID_ROUNDS
        assert rng.locale == Locale()


class TestChaosConfig:

    def test_defaults(self):
        cfg = ChaosConfig()
        assert cfg.rounds == 20
        assert cfg.locale == Locale()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CHAOS_ROUNDS", "12")
        monkeypatch.setenv("CHAOS_PEBBLE", "7")
        monkeypatch.setenv("CHAOS_STREAM", "1")
        cfg = ChaosConfig.from_env()
        assert cfg.rounds == 12
        assert cfg.locale == Locale(7, 1)

    def test_from_env_defaults(self, monkeypatch):
        for name in ("CHAOS_ROUNDS", "CHAOS_PEBBLE", "CHAOS_STREAM"):
            monkeypatch.delenv(name, raising=False)
        assert ChaosConfig.from_env() == ChaosConfig()
