"""Sculpo trainer scheduling backend: availability, blocked time and bookings."""
