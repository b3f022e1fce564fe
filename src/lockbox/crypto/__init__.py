"""Cryptographic building blocks used by the container codec."""
