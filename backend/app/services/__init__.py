"""Business logic: auth, experiences, bookings."""
