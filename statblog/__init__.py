"""Helpers behind the statblog posts."""
