"""Tests for password hashing and verification."""

import asyncio
import hashlib

import pytest

from ministry.core.modules.user.passwords import KEY_LENGTH, hash_password, verify_password


class TestHashPassword:
    """Tests for hash_password."""

    async def test_stored_form_is_hex_key_dot_salt(self):
        """Test that the stored form is a hex key and a hex salt joined by a dot."""
        hashed, salt = (await hash_password("secret1")).split(".")
        assert len(hashed) == KEY_LENGTH * 2
        assert len(salt) == 32
        int(hashed, 16)
        int(salt, 16)

    async def test_same_password_gets_different_salts(self):
        """Test that hashing twice yields different stored forms that both verify."""
        first = await hash_password("secret1")
        second = await hash_password("secret1")
        assert first != second
        assert await verify_password("secret1", first)
        assert await verify_password("secret1", second)


class TestVerifyPassword:
    """Tests for verify_password."""

    @pytest.mark.parametrize("password", ["secret1", "", "pässwörd", "with space", "x" * 200])
    async def test_correct_password_verifies(self, password):
        assert await verify_password(password, await hash_password(password)) is True

    async def test_wrong_password_fails(self):
        assert await verify_password("secret2", await hash_password("secret1")) is False

    async def test_hash_derived_from_ascii_salt_bytes(self):
        """Test that the salt is used as text, not decoded from hex, for key derivation."""
        salt = "00112233445566778899aabbccddeeff"
        key = hashlib.scrypt(b"secret1", salt=salt.encode(), n=16384, r=8, p=1, dklen=64)
        assert await verify_password("secret1", f"{key.hex()}.{salt}") is True

    @pytest.mark.parametrize(
        "stored",
        [
            None,
            "",
            "no-delimiter",
            "abc.",
            ".abcdef",
            "zz-not-hex.00112233445566778899aabbccddeeff",
            "abcd.00112233445566778899aabbccddeeff",  # key too short
            "a.b.c",
        ],
    )
    async def test_malformed_stored_value_never_verifies(self, stored):
        """Test that malformed stored values fail verification instead of raising."""
        assert await verify_password("secret1", stored) is False


class TestEventLoop:
    async def test_loop_keeps_running_during_hashing(self):
        """Test that other tasks get scheduled while keys are being derived."""
        stored = await hash_password("secret1")
        ticks = 0
        done = asyncio.Event()

        async def ticker():
            nonlocal ticks
            while not done.is_set():
                ticks += 1
                await asyncio.sleep(0.001)

        ticker_task = asyncio.create_task(ticker())
        await asyncio.sleep(0)  # let the ticker take its first step
        ticks_before = ticks
        await asyncio.gather(*(verify_password("secret1", stored) for _ in range(5)))
        done.set()
        await ticker_task

        assert ticks - ticks_before >= 10
