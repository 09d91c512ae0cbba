"""
The `crypt` package provides the password utilities used by the
authentication workflows.

Contents
--------
- encrypt_decrypt
    Utility module exposing the `EncryptionDec` class:
        * `hash_password` hashes plaintext passwords using bcrypt
        * `check_passwords` verifies a plaintext password against a hashed one
        * `is_valid_password` enforces the length rules (6 characters to 72 UTF-8 bytes)
"""
