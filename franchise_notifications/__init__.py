"""Franchise notification creation and multi-channel delivery engine."""
