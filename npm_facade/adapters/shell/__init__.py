"""Runners — execute rendered npm command lines."""
